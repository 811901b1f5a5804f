"""GET /v1/reports/monthly - income and expenses for a calendar month"""

from datetime import date
from typing import Callable, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from household_finance.api.v1.schemas import MonthlyReportResponse
from household_finance.api.dependencies import get_clock
from household_finance.infrastructure.database.session import get_db
from household_finance.infrastructure.database.repositories import AccountRepository, TransactionRepository
from household_finance.domain.reports import build_monthly_report

router = APIRouter()


@router.get("/reports/monthly", response_model=MonthlyReportResponse)
def get_monthly_report(
    user_id: str = Query(..., description="User identifier"),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, description="1-12"),
    db: Session = Depends(get_db),
    today: Callable[[], date] = Depends(get_clock),
):
    """
    Summarize a month by transaction date.

    Year and month default to the current ones.
    """
    current = today()
    report = build_monthly_report(
        user_id,
        year if year is not None else current.year,
        month if month is not None else current.month,
        TransactionRepository(db),
        AccountRepository(db),
    )
    return MonthlyReportResponse.model_validate(report)
