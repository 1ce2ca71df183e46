"""
Statement API endpoints.

The API layer is thin: it turns HTTP requests into calls on
StatementService, commits or rolls back the session, and maps
ledger errors to status codes. The acting user arrives already
authenticated in the X-User-Id header.
"""

import uuid

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from statement_ledger.errors import ErrorKind, LedgerError, StorageError
from statement_ledger.models.base import get_db
from statement_ledger.repositories.sql import SqlLedgerStore, SqlUserDirectory
from statement_ledger.schemas.statement import (
    BalanceResponse,
    StatementBody,
    StatementEntryResponse,
)
from statement_ledger.services.statement_service import StatementService

router = APIRouter(prefix="/statements", tags=["Statements"])

NOT_FOUND_KINDS = {ErrorKind.USER_NOT_FOUND, ErrorKind.STATEMENT_NOT_FOUND}


def get_actor_id(x_user_id: uuid.UUID | None = Header(default=None)) -> uuid.UUID:
    """The verified user id set by the authentication layer."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Missing user identity")
    return x_user_id


def get_statement_service(db: Session = Depends(get_db)) -> StatementService:
    return StatementService(SqlUserDirectory(db), SqlLedgerStore(db))


def _http_error(error: Exception) -> HTTPException:
    if isinstance(error, LedgerError):
        status_code = 404 if error.kind in NOT_FOUND_KINDS else 400
        return HTTPException(status_code=status_code, detail=error.message)
    return HTTPException(status_code=503, detail="Storage unavailable")


# --- Write Endpoints ---

@router.post("/deposit", response_model=StatementEntryResponse, status_code=201)
def deposit(
    body: StatementBody,
    actor_id: uuid.UUID = Depends(get_actor_id),
    service: StatementService = Depends(get_statement_service),
    db: Session = Depends(get_db),
):
    """Deposit money into the caller's account."""
    try:
        entry = service.create_deposit(actor_id, body.amount, body.description)
        response = StatementEntryResponse.model_validate(entry)
        db.commit()
        return response
    except (LedgerError, StorageError) as e:
        db.rollback()
        raise _http_error(e)


@router.post("/withdraw", response_model=StatementEntryResponse, status_code=201)
def withdraw(
    body: StatementBody,
    actor_id: uuid.UUID = Depends(get_actor_id),
    service: StatementService = Depends(get_statement_service),
    db: Session = Depends(get_db),
):
    """Withdraw money from the caller's account."""
    try:
        entry = service.create_withdraw(actor_id, body.amount, body.description)
        response = StatementEntryResponse.model_validate(entry)
        db.commit()
        return response
    except (LedgerError, StorageError) as e:
        db.rollback()
        raise _http_error(e)


@router.post(
    "/transfers/{receiver_id}",
    response_model=StatementEntryResponse,
    status_code=201,
)
def transfer(
    receiver_id: uuid.UUID,
    body: StatementBody,
    actor_id: uuid.UUID = Depends(get_actor_id),
    service: StatementService = Depends(get_statement_service),
    db: Session = Depends(get_db),
):
    """
    Transfer money from the caller to another user.

    Responds with the receiver's credit entry; its transfer_id
    also identifies the caller's debit entry.
    """
    try:
        entry = service.create_transfer(
            actor_id, receiver_id, body.amount, body.description
        )
        response = StatementEntryResponse.model_validate(entry)
        db.commit()
        return response
    except (LedgerError, StorageError) as e:
        db.rollback()
        raise _http_error(e)


# --- Read Endpoints ---

@router.get("/balance", response_model=BalanceResponse)
def get_balance(
    with_statement: bool = True,
    actor_id: uuid.UUID = Depends(get_actor_id),
    service: StatementService = Depends(get_statement_service),
):
    """Get the caller's balance, calculated from their entries."""
    try:
        result = service.get_balance(actor_id, with_statement=with_statement)
    except (LedgerError, StorageError) as e:
        raise _http_error(e)

    return BalanceResponse(
        statement=[StatementEntryResponse.model_validate(e) for e in result.entries],
        balance=result.balance,
    )


@router.get("/{statement_id}", response_model=StatementEntryResponse)
def get_statement(
    statement_id: uuid.UUID,
    actor_id: uuid.UUID = Depends(get_actor_id),
    service: StatementService = Depends(get_statement_service),
):
    """Get one of the caller's entries."""
    try:
        return service.get_entry(actor_id, statement_id)
    except (LedgerError, StorageError) as e:
        raise _http_error(e)
