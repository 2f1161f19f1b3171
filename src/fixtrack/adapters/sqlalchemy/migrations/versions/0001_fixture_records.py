"""Create fixture record log and store revisions.

Revision ID: 0001_fixture_records
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_fixture_records"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "fixture_record",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("fixture_id", sa.String(length=10), nullable=False),
        sa.Column("store_id", sa.String(), nullable=False),
        sa.Column("fixture_type", sa.String(), nullable=False),
        sa.Column("brand", sa.String(), nullable=False),
        sa.Column("floor_index", sa.Integer(), nullable=False),
        sa.Column("pos_x", sa.Float(), nullable=False),
        sa.Column("pos_y", sa.Float(), nullable=False),
        sa.Column("pos_z", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_fixture_record")),
    )
    op.create_index(
        "ix_fixture_record_store_id_fixture_id",
        "fixture_record",
        ["store_id", "fixture_id"],
    )
    op.create_index("ix_fixture_record_fixture_id", "fixture_record", ["fixture_id"])

    op.create_table(
        "store_revision",
        sa.Column("store_id", sa.String(), nullable=False),
        sa.Column("revision", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("store_id", name=op.f("pk_store_revision")),
    )


def downgrade() -> None:
    op.drop_table("store_revision")
    op.drop_index("ix_fixture_record_fixture_id", table_name="fixture_record")
    op.drop_index("ix_fixture_record_store_id_fixture_id", table_name="fixture_record")
    op.drop_table("fixture_record")
