"""0001: create users and statement_entries tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENTRY_TYPES = ("DEPOSIT", "WITHDRAW", "TRANSFER_DEBIT", "TRANSFER_CREDIT")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "statement_entries",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "entry_type",
            sa.Enum(*ENTRY_TYPES, name="entry_type_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("counterparty_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("transfer_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_statement_entries_amount_positive"),
    )
    op.create_index(
        "ix_statement_entries_owner_id", "statement_entries", ["owner_id"]
    )
    op.create_index(
        "ix_statement_entries_transfer_id", "statement_entries", ["transfer_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_statement_entries_transfer_id", table_name="statement_entries")
    op.drop_index("ix_statement_entries_owner_id", table_name="statement_entries")
    op.drop_table("statement_entries")
    op.drop_table("users")
    sa.Enum(name="entry_type_enum").drop(op.get_bind(), checkfirst=True)
