"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Callable
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from household_finance.infrastructure.database.session import get_db
from household_finance.infrastructure.database.repositories import (
    AccountRepository,
    CreditCardRepository,
    InvestmentRepository,
    TransactionRepository,
)
from household_finance.domain.accounts import AccountService
from household_finance.domain.cards import CreditCardService
from household_finance.domain.investments import InvestmentService
from household_finance.domain.payments import TransactionPaymentAssigner
from household_finance.domain.transactions import TransactionService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock() -> Callable[[], date]:
    """Source of "today" for defaults (transaction date, current invoice month)"""
    return date.today


def get_transaction_service(
    db: Session = Depends(get_db),
    today: Callable[[], date] = Depends(get_clock),
) -> TransactionService:
    assigner = TransactionPaymentAssigner(CreditCardRepository(db), AccountRepository(db), today=today)
    return TransactionService(TransactionRepository(db), assigner)


def get_credit_card_service(
    db: Session = Depends(get_db),
    today: Callable[[], date] = Depends(get_clock),
) -> CreditCardService:
    return CreditCardService(CreditCardRepository(db), TransactionRepository(db), today=today)


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(AccountRepository(db), TransactionRepository(db))


def get_investment_service(db: Session = Depends(get_db)) -> InvestmentService:
    return InvestmentService(InvestmentRepository(db))
