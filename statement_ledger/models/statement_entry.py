"""
Statement entry model.

One entry is one recorded movement on one account: a deposit,
a withdrawal, or one side of a transfer. Entries are append-only;
once written they are never modified or deleted. Balances are
always derived from them.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    BigInteger, Text, DateTime, ForeignKey, CheckConstraint,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from statement_ledger.models.base import Base, utcnow
from statement_ledger.models.enums import EntryType


class StatementEntry(Base):
    """
    An immutable ledger entry owned by a single user.

    Transfers produce two entries sharing a transfer_id: a
    TRANSFER_DEBIT on the sender whose counterparty_id is the
    receiver, and a TRANSFER_CREDIT on the receiver whose
    counterparty_id is the sender.

    Instances are also used unattached to any session by the
    in-memory store, so ids and timestamps are assigned by the
    statement service rather than left to column defaults.
    """

    __tablename__ = "statement_entries"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_statement_entries_amount_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    entry_type: Mapped[EntryType] = mapped_column(
        SAEnum(EntryType, name="entry_type_enum", create_constraint=True),
        nullable=False,
    )
    # Minor currency units (cents), so no dialect ever rounds money
    amount: Mapped[int] = mapped_column(
        BigInteger, nullable=False
    )
    description: Mapped[str] = mapped_column(
        Text, nullable=False
    )
    counterparty_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    transfer_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<StatementEntry {self.entry_type.value} "
            f"{self.amount} owner={self.owner_id}>"
        )
