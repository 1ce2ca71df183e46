"""
Shared enumerations for database models.

Python enums mapped to database enums, so an invalid
entry_type is rejected by the database as well.
"""

import enum


class OperationType(str, enum.Enum):
    """What the caller asked for."""
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    TRANSFER = "TRANSFER"


class EntryType(str, enum.Enum):
    """What was written to the ledger."""
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    TRANSFER_DEBIT = "TRANSFER_DEBIT"
    TRANSFER_CREDIT = "TRANSFER_CREDIT"


# Entry types that add to / subtract from the owner's balance
CREDIT_ENTRY_TYPES = frozenset({EntryType.DEPOSIT, EntryType.TRANSFER_CREDIT})
DEBIT_ENTRY_TYPES = frozenset({EntryType.WITHDRAW, EntryType.TRANSFER_DEBIT})
