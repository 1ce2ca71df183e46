"""
User directory and ledger store implementations.

Every capability has an in-memory and a SQLAlchemy variant
satisfying the same contract.
"""

from statement_ledger.repositories.base import LedgerStore, UserDirectory
from statement_ledger.repositories.memory import (
    InMemoryLedgerStore,
    InMemoryUserDirectory,
)
from statement_ledger.repositories.sql import SqlLedgerStore, SqlUserDirectory

__all__ = [
    "LedgerStore",
    "UserDirectory",
    "InMemoryLedgerStore",
    "InMemoryUserDirectory",
    "SqlLedgerStore",
    "SqlUserDirectory",
]
