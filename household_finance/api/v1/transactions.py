"""/v1/transactions - record income and expenses against an account or credit card"""

import uuid
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from household_finance.api.v1.schemas import (
    TransactionCreateRequest,
    TransactionResponse,
    TransactionUpdateRequest,
)
from household_finance.api.dependencies import get_request_id, get_transaction_service
from household_finance.infrastructure.database.session import get_db
from household_finance.domain.models import TransactionInput, TransactionPatch
from household_finance.domain.transactions import TransactionService
from household_finance.infrastructure.observability.logging import log_transaction_event
from household_finance.infrastructure.observability.metrics import record_transaction_write

router = APIRouter()


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request_body: TransactionCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Record a transaction.

    Flow:
    1. Validate payment source (account XOR credit card), amount, type, category
    2. Resolve the card and assign the invoice month, or check the account exists
    3. Persist and commit
    """
    transaction = service.create_transaction(TransactionInput(**request_body.model_dump()))
    db.commit()

    record_transaction_write("created", None, transaction)
    log_transaction_event(get_request_id(request), "created", transaction)

    return TransactionResponse.model_validate(transaction)


@router.get("/transactions", response_model=List[TransactionResponse])
def list_transactions(
    user_id: str = Query(..., description="User identifier"),
    type: Optional[str] = Query(None, description="income or expense"),
    category: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: TransactionService = Depends(get_transaction_service),
):
    """List a user's transactions, newest first"""
    transactions = service.list_transactions(
        user_id, type=type, category=category, start_date=start_date, end_date=end_date
    )
    return [TransactionResponse.model_validate(t) for t in transactions]


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: uuid.UUID,
    service: TransactionService = Depends(get_transaction_service),
):
    return TransactionResponse.model_validate(service.get_transaction(transaction_id))


@router.patch("/transactions/{transaction_id}", response_model=TransactionResponse)
@router.put("/transactions/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: uuid.UUID,
    request_body: TransactionUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Partially update a transaction.

    Only the fields present in the body change; null clears account_id,
    credit_card_id or description. The invoice month is recomputed when the
    card or the date changes.
    """
    patch = TransactionPatch(**request_body.model_dump(exclude_unset=True))
    before, transaction = service.revise_transaction(transaction_id, patch)
    db.commit()

    record_transaction_write("updated", before, transaction)
    log_transaction_event(get_request_id(request), "updated", transaction)

    return TransactionResponse.model_validate(transaction)


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: TransactionService = Depends(get_transaction_service),
):
    service.delete_transaction(transaction_id)
    db.commit()
    return Response(status_code=204)
