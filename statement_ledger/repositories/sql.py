"""
SQLAlchemy user directory and ledger store.

Both take a session and never commit it. The caller owns the
transaction boundary: it commits once the whole operation has
succeeded, or rolls back if anything failed.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Iterable, Iterator

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from statement_ledger.errors import StorageError
from statement_ledger.models.enums import CREDIT_ENTRY_TYPES
from statement_ledger.models.statement_entry import StatementEntry
from statement_ledger.models.user import User
from statement_ledger.repositories.base import LedgerStore, UserDirectory

logger = logging.getLogger(__name__)


class SqlUserDirectory(UserDirectory):

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, user_id: uuid.UUID) -> User | None:
        try:
            return self.db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("User lookup failed", exc_info=True)
            raise StorageError(str(e)) from e


class SqlLedgerStore(LedgerStore):

    def __init__(self, db: Session):
        self.db = db

    def _flush(self, *entries: StatementEntry) -> None:
        self.db.add_all(entries)
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            # Flush failed part-way: discard everything in this unit
            # of work so a half-written transfer can never be committed.
            self.db.rollback()
            logger.error("Failed to append statement entries", exc_info=True)
            raise StorageError(str(e)) from e

    def append(self, entry: StatementEntry) -> StatementEntry:
        self._flush(entry)
        return entry

    def append_pair(
        self, debit: StatementEntry, credit: StatementEntry
    ) -> tuple[StatementEntry, StatementEntry]:
        self._flush(debit, credit)
        return debit, credit

    def list_by_owner(self, user_id: uuid.UUID) -> list[StatementEntry]:
        """Return all entries for a user, oldest first."""
        try:
            entries = self.db.execute(
                select(StatementEntry)
                .where(StatementEntry.owner_id == user_id)
                .order_by(StatementEntry.created_at)
            ).scalars().all()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        return list(entries)

    def find_by_owner_and_id(
        self, user_id: uuid.UUID, entry_id: uuid.UUID
    ) -> StatementEntry | None:
        try:
            return self.db.execute(
                select(StatementEntry).where(
                    StatementEntry.id == entry_id,
                    StatementEntry.owner_id == user_id,
                )
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def get_balance(self, user_id: uuid.UUID) -> int:
        """
        Sum the user's entries in the database.

        Credits count positive and debits negative, so a single
        aggregate gives the signed balance.
        """
        signed_amount = case(
            (
                StatementEntry.entry_type.in_(sorted(CREDIT_ENTRY_TYPES)),
                StatementEntry.amount,
            ),
            else_=-StatementEntry.amount,
        )
        try:
            total = self.db.execute(
                select(func.coalesce(func.sum(signed_amount), 0)).where(
                    StatementEntry.owner_id == user_id
                )
            ).scalar()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        return int(total)

    @contextmanager
    def locked(self, account_ids: Iterable[uuid.UUID]) -> Iterator[None]:
        """
        Take the write lock on the users involved until the session's
        transaction ends.

        Backends with row locks get SELECT ... FOR UPDATE in id order.
        SQLite has none, and pysqlite only opens a transaction at the
        first write, so a no-op UPDATE on the same rows is issued
        instead: it takes SQLite's database write lock before the
        balance is read, and a second writer waits on it until we
        commit or roll back.
        """
        ordered = sorted(set(account_ids), key=str)
        users = User.__table__
        try:
            if self.db.get_bind().dialect.name == "sqlite":
                self.db.execute(
                    update(users)
                    .where(users.c.id.in_(ordered))
                    .values(name=users.c.name)
                )
            else:
                self.db.execute(
                    select(User.id)
                    .where(User.id.in_(ordered))
                    .order_by(User.id)
                    .with_for_update()
                ).all()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        yield
