"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from statement_ledger.models.base import Base
from statement_ledger.models.enums import EntryType, OperationType
from statement_ledger.models.user import User
from statement_ledger.models.statement_entry import StatementEntry

__all__ = [
    "Base",
    "EntryType",
    "OperationType",
    "User",
    "StatementEntry",
]
