"""
Pydantic schemas for statement operations.

OperationRequest is what the statement service validates and
executes. The *Body schemas are the HTTP request bodies; the
acting user comes from the authenticated request, not the body.

Amounts are integers in the currency's minor unit (cents).
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from statement_ledger.models.enums import EntryType, OperationType

# Largest amount a BIGINT column can hold
MAX_AMOUNT = 2**63 - 1


# --- Core Schemas ---

class OperationRequest(BaseModel):
    """
    A single deposit, withdrawal or transfer request.

    Neither amount nor description is constrained here. Amount
    checks are ledger rules reported as InvalidAmount by the
    validator, and description length is only limited at the
    HTTP boundary.
    """
    actor_id: uuid.UUID
    operation_type: OperationType
    amount: Decimal
    description: str = ""
    receiver_id: uuid.UUID | None = None


# --- Request Schemas ---

class StatementBody(BaseModel):
    amount: int = Field(gt=0, le=MAX_AMOUNT)
    description: str = Field(min_length=1, max_length=255)


# --- Response Schemas ---

class StatementEntryResponse(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    entry_type: EntryType
    amount: int
    description: str
    counterparty_id: uuid.UUID | None
    transfer_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BalanceResponse(BaseModel):
    """Current balance, optionally with the entries it was derived from."""
    statement: list[StatementEntryResponse]
    balance: int
