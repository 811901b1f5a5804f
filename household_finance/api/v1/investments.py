"""/v1/investments - investment positions and portfolio returns"""

import dataclasses
import uuid
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from household_finance.api.v1.schemas import (
    InvestmentCreateRequest,
    InvestmentListResponse,
    InvestmentResponse,
    InvestmentSummary,
    InvestmentUpdateRequest,
)
from household_finance.api.dependencies import get_investment_service
from household_finance.infrastructure.database.session import get_db
from household_finance.domain.investments import InvestmentService, investment_return, return_percentage
from household_finance.domain.models import Investment, InvestmentPatch

router = APIRouter()


def _to_response(investment: Investment) -> InvestmentResponse:
    return InvestmentResponse(
        **dataclasses.asdict(investment),
        return_amount=investment_return(investment.amount_invested, investment.current_value),
        return_percentage=return_percentage(investment.amount_invested, investment.current_value),
    )


@router.post("/investments", response_model=InvestmentResponse, status_code=201)
def create_investment(
    request_body: InvestmentCreateRequest,
    db: Session = Depends(get_db),
    service: InvestmentService = Depends(get_investment_service),
):
    investment = service.create_investment(**request_body.model_dump())
    db.commit()
    return _to_response(investment)


@router.get("/investments", response_model=InvestmentListResponse)
def list_investments(
    user_id: str = Query(..., description="User identifier"),
    type: Optional[str] = Query(None, description="stock, fund, crypto or pension"),
    service: InvestmentService = Depends(get_investment_service),
):
    """List a user's positions, newest purchase first, with totals over the listed positions"""
    portfolio = service.list_investments(user_id, type)
    return InvestmentListResponse(
        investments=[_to_response(i) for i in portfolio.investments],
        summary=InvestmentSummary(
            total_invested=portfolio.total_invested,
            total_current_value=portfolio.total_current_value,
            total_return=portfolio.total_return,
            total_return_percentage=portfolio.total_return_percentage,
            count=len(portfolio.investments),
        ),
    )


@router.get("/investments/{investment_id}", response_model=InvestmentResponse)
def get_investment(investment_id: uuid.UUID, service: InvestmentService = Depends(get_investment_service)):
    return _to_response(service.get_investment(investment_id))


@router.patch("/investments/{investment_id}", response_model=InvestmentResponse)
@router.put("/investments/{investment_id}", response_model=InvestmentResponse)
def update_investment(
    investment_id: uuid.UUID,
    request_body: InvestmentUpdateRequest,
    db: Session = Depends(get_db),
    service: InvestmentService = Depends(get_investment_service),
):
    patch = InvestmentPatch(**request_body.model_dump(exclude_unset=True))
    investment = service.update_investment(investment_id, patch)
    db.commit()
    return _to_response(investment)


@router.delete("/investments/{investment_id}", status_code=204)
def delete_investment(
    investment_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: InvestmentService = Depends(get_investment_service),
):
    service.delete_investment(investment_id)
    db.commit()
    return Response(status_code=204)
