"""
Capabilities the statement service depends on.

The service never talks to a database directly. It is given a
UserDirectory and a LedgerStore, and any pair of implementations
honouring these contracts can be swapped in.
"""

import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterable, Iterator

from statement_ledger.balance import calculate_balance
from statement_ledger.models.statement_entry import StatementEntry
from statement_ledger.models.user import User


class UserDirectory(ABC):
    """Read-only view of the users known to the system."""

    @abstractmethod
    def find_by_id(self, user_id: uuid.UUID) -> User | None:
        """Return the user, or None if the id does not resolve."""

    def exists(self, user_id: uuid.UUID) -> bool:
        return self.find_by_id(user_id) is not None


class LedgerStore(ABC):
    """
    Append-only storage of statement entries.

    Writers that read a balance and then append against it must
    do both inside locked() for the accounts involved. That is
    the only thing standing between two concurrent withdrawals
    and an overdrawn account.
    """

    @abstractmethod
    def append(self, entry: StatementEntry) -> StatementEntry:
        """Persist a single entry."""

    @abstractmethod
    def append_pair(
        self, debit: StatementEntry, credit: StatementEntry
    ) -> tuple[StatementEntry, StatementEntry]:
        """Persist both entries of a transfer, or neither."""

    @abstractmethod
    def list_by_owner(self, user_id: uuid.UUID) -> list[StatementEntry]:
        """Return every entry owned by the user."""

    @abstractmethod
    def find_by_owner_and_id(
        self, user_id: uuid.UUID, entry_id: uuid.UUID
    ) -> StatementEntry | None:
        """Return the entry only if it exists and belongs to the user."""

    @abstractmethod
    @contextmanager
    def locked(self, account_ids: Iterable[uuid.UUID]) -> Iterator[None]:
        """Serialize writers on the given accounts for the duration of the block."""

    def get_balance(self, user_id: uuid.UUID) -> int:
        return calculate_balance(self.list_by_owner(user_id))
