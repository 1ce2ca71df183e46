"""
Ledger error taxonomy.

Every business-rule rejection is a LedgerError tagged with an
ErrorKind. Callers should branch on `error.kind` rather than on
the concrete class. Infrastructure faults are reported as
StorageError, which deliberately sits outside this hierarchy.
"""

import enum


class ErrorKind(str, enum.Enum):
    """Closed set of reasons a ledger operation can be rejected."""
    USER_NOT_FOUND = "USER_NOT_FOUND"
    OPERATION_NOT_PERMITTED = "OPERATION_NOT_PERMITTED"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    STATEMENT_NOT_FOUND = "STATEMENT_NOT_FOUND"
    INVALID_AMOUNT = "INVALID_AMOUNT"


class LedgerError(Exception):
    """Base class for recoverable business-rule failures."""

    kind: ErrorKind
    default_message: str = "Ledger operation rejected"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.kind.value}: {self.message}>"


class UserNotFound(LedgerError):
    kind = ErrorKind.USER_NOT_FOUND
    default_message = "User not found"


class OperationNotPermitted(LedgerError):
    kind = ErrorKind.OPERATION_NOT_PERMITTED
    default_message = "Operation not permitted"


class InsufficientFunds(LedgerError):
    kind = ErrorKind.INSUFFICIENT_FUNDS
    default_message = "Insufficient funds"


class StatementNotFound(LedgerError):
    kind = ErrorKind.STATEMENT_NOT_FOUND
    default_message = "Statement not found"


class InvalidAmount(LedgerError):
    kind = ErrorKind.INVALID_AMOUNT
    default_message = "Invalid amount"


class StorageError(Exception):
    """A persistence-layer failure (connectivity, constraint violation)."""
