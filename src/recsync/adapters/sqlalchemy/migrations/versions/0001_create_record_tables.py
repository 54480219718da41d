"""create record and record_batch tables

Revision ID: 0001
Revises:
Create Date: 2026-09-28 10:12:41.000000
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | tuple[str, ...] | None = None
depends_on: str | tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "record",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("value", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("is_open", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_record")),
    )
    op.create_index("ix_record_status", "record", ["status"], unique=False)
    op.create_index("ix_record_updated_at", "record", ["updated_at"], unique=False)
    op.create_index("ix_record_is_open", "record", ["is_open"], unique=False)

    op.create_table(
        "record_batch",
        sa.Column("batch_id", sa.String(length=32), nullable=False),
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("value", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("batch_id", "id", name=op.f("pk_record_batch")),
    )


def downgrade() -> None:
    op.drop_table("record_batch")
    op.drop_index("ix_record_is_open", table_name="record")
    op.drop_index("ix_record_updated_at", table_name="record")
    op.drop_index("ix_record_status", table_name="record")
    op.drop_table("record")
