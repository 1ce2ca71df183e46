"""
Operation validator: decides whether a request may be executed.

Rules are checked in a fixed order and the first failure wins:

1. The acting user exists                      -> UserNotFound
2. For transfers, the receiver exists          -> UserNotFound
3. For transfers, receiver is not the actor    -> OperationNotPermitted
4. For withdrawals and transfers, balance >= amount -> InsufficientFunds
5. The amount is a positive whole number of minor
   units that fits the ledger                  -> InvalidAmount

The validator is read-only. On its own it cannot prevent two
concurrent withdrawals from both passing rule 4; the statement
service runs it inside the store's per-account lock for that.
"""

from statement_ledger.balance import BalanceCalculator
from statement_ledger.errors import (
    InsufficientFunds,
    InvalidAmount,
    OperationNotPermitted,
    UserNotFound,
)
from statement_ledger.models.enums import OperationType
from statement_ledger.repositories.base import UserDirectory
from statement_ledger.schemas.statement import MAX_AMOUNT, OperationRequest


# Operations that take money out of the actor's account
FUNDED_OPERATIONS = frozenset({OperationType.WITHDRAW, OperationType.TRANSFER})


class OperationValidator:

    def __init__(self, users: UserDirectory, balances: BalanceCalculator):
        self.users = users
        self.balances = balances

    def validate(self, request: OperationRequest) -> None:
        """Raise the first applicable LedgerError, or return if admissible."""
        if not self.users.exists(request.actor_id):
            raise UserNotFound()

        if request.operation_type == OperationType.TRANSFER:
            if request.receiver_id is None or not self.users.exists(request.receiver_id):
                raise UserNotFound()
            if request.receiver_id == request.actor_id:
                raise OperationNotPermitted()

        if request.operation_type in FUNDED_OPERATIONS:
            balance = self.balances.compute_balance(request.actor_id)
            if balance < request.amount:
                raise InsufficientFunds()

        amount = request.amount
        if amount <= 0 or amount > MAX_AMOUNT or amount != amount.to_integral_value():
            raise InvalidAmount(f"Invalid amount: {request.amount}")
