"""Business logic services."""

from statement_ledger.services.operation_validator import OperationValidator
from statement_ledger.services.statement_service import (
    BalanceWithHistory,
    StatementService,
)

__all__ = ["OperationValidator", "StatementService", "BalanceWithHistory"]
