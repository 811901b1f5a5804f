"""/v1/credit-cards - card management and invoices"""

import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from household_finance.api.v1.schemas import (
    CreditCardCreateRequest,
    CreditCardResponse,
    CreditCardUpdateRequest,
    InvoiceResponse,
)
from household_finance.api.dependencies import get_credit_card_service, get_request_id
from household_finance.infrastructure.database.session import get_db
from household_finance.domain.cards import CreditCardService
from household_finance.domain.models import CreditCardPatch
from household_finance.infrastructure.observability.logging import log_invoice_lookup
from household_finance.infrastructure.observability.metrics import invoice_lookup_counter

router = APIRouter()


@router.post("/credit-cards", response_model=CreditCardResponse, status_code=201)
def create_credit_card(
    request_body: CreditCardCreateRequest,
    db: Session = Depends(get_db),
    service: CreditCardService = Depends(get_credit_card_service),
):
    """Register a card. current_invoice_month defaults to this month."""
    card = service.create_card(**request_body.model_dump())
    db.commit()
    return CreditCardResponse.model_validate(card)


@router.get("/credit-cards", response_model=List[CreditCardResponse])
def list_credit_cards(
    user_id: str = Query(..., description="User identifier"),
    service: CreditCardService = Depends(get_credit_card_service),
):
    return [CreditCardResponse.model_validate(c) for c in service.list_cards(user_id)]


@router.get("/credit-cards/{card_id}", response_model=CreditCardResponse)
def get_credit_card(card_id: uuid.UUID, service: CreditCardService = Depends(get_credit_card_service)):
    return CreditCardResponse.model_validate(service.get_card(card_id))


@router.patch("/credit-cards/{card_id}", response_model=CreditCardResponse)
@router.put("/credit-cards/{card_id}", response_model=CreditCardResponse)
def update_credit_card(
    card_id: uuid.UUID,
    request_body: CreditCardUpdateRequest,
    db: Session = Depends(get_db),
    service: CreditCardService = Depends(get_credit_card_service),
):
    """
    Partially update a card.

    A new closing day applies to transactions recorded from now on; existing
    transactions keep their invoice month.
    """
    card = service.update_card(card_id, CreditCardPatch(**request_body.model_dump(exclude_unset=True)))
    db.commit()
    return CreditCardResponse.model_validate(card)


@router.delete("/credit-cards/{card_id}", status_code=204)
def delete_credit_card(
    card_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: CreditCardService = Depends(get_credit_card_service),
):
    """Delete a card. Refused with 409 while transactions reference it."""
    service.delete_card(card_id)
    db.commit()
    return Response(status_code=204)


@router.get("/credit-cards/{card_id}/invoice", response_model=InvoiceResponse)
def get_invoice(
    card_id: uuid.UUID,
    request: Request,
    month: Optional[str] = Query(None, description="Invoice month YYYY-MM, defaults to the card's current one"),
    service: CreditCardService = Depends(get_credit_card_service),
):
    """
    Invoice totals for one billing cycle.

    Returns:
        Card, its transactions for the month (newest first), total and the
        remaining limit (negative when over the limit)
    """
    invoice = service.get_invoice(card_id, month)

    invoice_lookup_counter.labels(over_limit=str(invoice.available_limit < 0).lower()).inc()
    log_invoice_lookup(get_request_id(request), invoice)

    return InvoiceResponse.model_validate(invoice)
