"""In-memory user directory and ledger store, used by tests and tooling."""

import threading
import uuid
from contextlib import ExitStack, contextmanager
from typing import Iterable, Iterator

from statement_ledger.models.statement_entry import StatementEntry
from statement_ledger.models.user import User
from statement_ledger.repositories.base import LedgerStore, UserDirectory


class InMemoryUserDirectory(UserDirectory):

    def __init__(self, users: Iterable[User] = ()):
        self._users: dict[uuid.UUID, User] = {}
        self._lock = threading.RLock()
        for user in users:
            self.add(user)

    def add(self, user: User) -> User:
        """Register a user. Ids are assigned here if the caller left them empty."""
        if user.id is None:
            user.id = uuid.uuid4()
        with self._lock:
            self._users[user.id] = user
        return user

    def find_by_id(self, user_id: uuid.UUID) -> User | None:
        with self._lock:
            return self._users.get(user_id)


class InMemoryLedgerStore(LedgerStore):
    """
    Entries kept in a list, guarded by one store-wide lock.

    Per-account locks handed out by locked() are separate from
    the store lock so that transfers between unrelated accounts
    do not wait on each other. Each account lock is counted by
    the callers holding or waiting on it and dropped when the
    last one leaves, so ids that are only ever rejected do not
    accumulate.
    """

    def __init__(self):
        self._entries: list[StatementEntry] = []
        self._lock = threading.RLock()
        # account id -> [lock, callers holding or waiting on it]
        self._account_locks: dict[uuid.UUID, list] = {}

    def append(self, entry: StatementEntry) -> StatementEntry:
        with self._lock:
            self._entries.append(entry)
        return entry

    def append_pair(
        self, debit: StatementEntry, credit: StatementEntry
    ) -> tuple[StatementEntry, StatementEntry]:
        # Both land under the same acquisition, so no reader ever
        # sees a debit without its credit.
        with self._lock:
            self._entries.extend((debit, credit))
        return debit, credit

    def list_by_owner(self, user_id: uuid.UUID) -> list[StatementEntry]:
        with self._lock:
            return [e for e in self._entries if e.owner_id == user_id]

    def find_by_owner_and_id(
        self, user_id: uuid.UUID, entry_id: uuid.UUID
    ) -> StatementEntry | None:
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id and entry.owner_id == user_id:
                    return entry
        return None

    def _acquire_slot(self, account_id: uuid.UUID) -> threading.Lock:
        with self._lock:
            slot = self._account_locks.setdefault(account_id, [threading.Lock(), 0])
            slot[1] += 1
            return slot[0]

    def _release_slot(self, account_id: uuid.UUID) -> None:
        with self._lock:
            slot = self._account_locks[account_id]
            slot[1] -= 1
            if slot[1] == 0:
                del self._account_locks[account_id]

    @contextmanager
    def locked(self, account_ids: Iterable[uuid.UUID]) -> Iterator[None]:
        # Always acquire in the same order to rule out deadlock
        # between A->B and B->A transfers.
        ordered = sorted(set(account_ids), key=str)
        with ExitStack() as stack:
            for account_id in ordered:
                lock = self._acquire_slot(account_id)
                stack.callback(self._release_slot, account_id)
                stack.enter_context(lock)
            yield
