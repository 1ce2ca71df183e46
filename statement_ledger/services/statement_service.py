"""
Statement service: deposits, withdrawals, transfers and lookups.

Each write operation:
1. Takes the store's lock on the accounts involved
2. Validates the request (see OperationValidator)
3. Appends one entry, or the debit/credit pair of a transfer
4. Returns the created entry

Validation and the write happen under the same lock, so a
balance checked in step 2 is still the balance at step 3.
Nothing is written if validation fails.
"""

import logging
import uuid
from dataclasses import dataclass, field

from statement_ledger.balance import BalanceCalculator
from statement_ledger.errors import LedgerError, StatementNotFound, UserNotFound
from statement_ledger.models.base import utcnow
from statement_ledger.models.enums import EntryType, OperationType
from statement_ledger.models.statement_entry import StatementEntry
from statement_ledger.repositories.base import LedgerStore, UserDirectory
from statement_ledger.schemas.statement import OperationRequest
from statement_ledger.services.operation_validator import OperationValidator

logger = logging.getLogger(__name__)


@dataclass
class BalanceWithHistory:
    balance: int
    entries: list[StatementEntry] = field(default_factory=list)


class StatementService:
    """
    All statement writes and reads pass through this service.

    Collaborators are passed in explicitly. Pair an in-memory
    directory and store for tests, or the SQL ones bound to a
    session for the HTTP layer.
    """

    def __init__(
        self,
        users: UserDirectory,
        store: LedgerStore,
        validator: OperationValidator | None = None,
    ):
        self.users = users
        self.store = store
        self.balances = BalanceCalculator(store)
        self.validator = validator or OperationValidator(users, self.balances)

    # --- Writes ---

    def create_deposit(
        self, actor_id: uuid.UUID, amount: int, description: str
    ) -> StatementEntry:
        return self.execute(OperationRequest(
            actor_id=actor_id,
            operation_type=OperationType.DEPOSIT,
            amount=amount,
            description=description,
        ))

    def create_withdraw(
        self, actor_id: uuid.UUID, amount: int, description: str
    ) -> StatementEntry:
        return self.execute(OperationRequest(
            actor_id=actor_id,
            operation_type=OperationType.WITHDRAW,
            amount=amount,
            description=description,
        ))

    def create_transfer(
        self,
        actor_id: uuid.UUID,
        receiver_id: uuid.UUID,
        amount: int,
        description: str,
    ) -> StatementEntry:
        """
        Move money from the actor to the receiver.

        Returns the receiver's TRANSFER_CREDIT entry. The sender's
        debit carries the same transfer_id.
        """
        return self.execute(OperationRequest(
            actor_id=actor_id,
            operation_type=OperationType.TRANSFER,
            amount=amount,
            description=description,
            receiver_id=receiver_id,
        ))

    def execute(self, request: OperationRequest) -> StatementEntry:
        """Validate and record a request as one unit."""
        accounts = [request.actor_id]
        if request.receiver_id is not None:
            accounts.append(request.receiver_id)

        with self.store.locked(accounts):
            try:
                self.validator.validate(request)
            except LedgerError as e:
                logger.warning(
                    "Rejected %s: %s", request.operation_type.value, e.message,
                    extra={
                        "actor_id": str(request.actor_id),
                        "operation": request.operation_type.value,
                        "kind": e.kind.value,
                    },
                )
                raise

            if request.operation_type == OperationType.TRANSFER:
                entry = self._record_transfer(request)
            else:
                entry_type = (
                    EntryType.DEPOSIT
                    if request.operation_type == OperationType.DEPOSIT
                    else EntryType.WITHDRAW
                )
                entry = self.store.append(self._new_entry(
                    owner_id=request.actor_id,
                    entry_type=entry_type,
                    request=request,
                ))

        logger.info(
            "Recorded %s of %s", request.operation_type.value, request.amount,
            extra={
                "actor_id": str(request.actor_id),
                "entry_id": str(entry.id),
                "operation": request.operation_type.value,
            },
        )
        return entry

    def _record_transfer(self, request: OperationRequest) -> StatementEntry:
        transfer_id = uuid.uuid4()
        debit = self._new_entry(
            owner_id=request.actor_id,
            entry_type=EntryType.TRANSFER_DEBIT,
            request=request,
            counterparty_id=request.receiver_id,
            transfer_id=transfer_id,
        )
        credit = self._new_entry(
            owner_id=request.receiver_id,
            entry_type=EntryType.TRANSFER_CREDIT,
            request=request,
            counterparty_id=request.actor_id,
            transfer_id=transfer_id,
        )
        _, credit = self.store.append_pair(debit, credit)
        return credit

    @staticmethod
    def _new_entry(
        owner_id: uuid.UUID,
        entry_type: EntryType,
        request: OperationRequest,
        counterparty_id: uuid.UUID | None = None,
        transfer_id: uuid.UUID | None = None,
    ) -> StatementEntry:
        now = utcnow()
        return StatementEntry(
            id=uuid.uuid4(),
            owner_id=owner_id,
            entry_type=entry_type,
            amount=int(request.amount),
            description=request.description,
            counterparty_id=counterparty_id,
            transfer_id=transfer_id,
            created_at=now,
            updated_at=now,
        )

    # --- Reads ---

    def get_balance(
        self, actor_id: uuid.UUID, with_statement: bool = True
    ) -> BalanceWithHistory:
        """
        Return the actor's balance and, by default, the entries behind it.

        Balance is computed by the store, not summed from the
        returned list, so a balance-only query never loads entries.
        """
        if not self.users.exists(actor_id):
            raise UserNotFound()

        balance = self.balances.compute_balance(actor_id)
        if not with_statement:
            return BalanceWithHistory(balance=balance)

        return BalanceWithHistory(
            balance=balance,
            entries=self.store.list_by_owner(actor_id),
        )

    def get_entry(
        self, actor_id: uuid.UUID, entry_id: uuid.UUID
    ) -> StatementEntry:
        """Get one of the actor's own entries by id."""
        if not self.users.exists(actor_id):
            raise UserNotFound()

        entry = self.store.find_by_owner_and_id(actor_id, entry_id)
        if entry is None:
            raise StatementNotFound()
        return entry
