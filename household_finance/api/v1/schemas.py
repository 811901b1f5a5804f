"""Pydantic schemas for API request/response validation"""

import uuid
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Dict, List, Optional


def _calendar_date(value):
    """Accept ISO dates or datetimes; the time of day is discarded"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


CalendarDate = Annotated[date, BeforeValidator(_calendar_date)]


class ErrorResponse(BaseModel):
    """Body returned for domain errors"""

    error: str
    detail: str
    fields: Dict[str, str] = {}


# Transactions


class TransactionCreateRequest(BaseModel):
    """Request body for POST /v1/transactions"""

    user_id: str = Field(..., min_length=1, description="Owner identifier")
    type: str = Field(..., description="income or expense")
    category: str
    amount: Decimal
    description: Optional[str] = None
    transaction_date: Optional[CalendarDate] = Field(None, description="Defaults to today")
    account_id: Optional[uuid.UUID] = None
    credit_card_id: Optional[uuid.UUID] = None


class TransactionUpdateRequest(BaseModel):
    """Request body for PATCH /v1/transactions/{id}. Omitted fields are kept, null clears."""

    type: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    transaction_date: Optional[CalendarDate] = None
    account_id: Optional[uuid.UUID] = None
    credit_card_id: Optional[uuid.UUID] = None
    invoice_month: Optional[str] = Field(None, description="Manual invoice override, YYYY-MM")


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    type: str
    category: str
    amount: Decimal
    description: Optional[str] = None
    transaction_date: date
    account_id: Optional[uuid.UUID] = None
    credit_card_id: Optional[uuid.UUID] = None
    invoice_month: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Credit cards


class CreditCardCreateRequest(BaseModel):
    """Request body for POST /v1/credit-cards"""

    user_id: str = Field(..., min_length=1)
    name: str
    limit: Decimal
    closing_day: int
    due_day: int
    current_invoice_month: Optional[str] = Field(None, description="YYYY-MM, defaults to the current month")


class CreditCardUpdateRequest(BaseModel):
    name: Optional[str] = None
    limit: Optional[Decimal] = None
    closing_day: Optional[int] = None
    due_day: Optional[int] = None
    current_invoice_month: Optional[str] = None


class CreditCardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    name: str
    limit: Decimal
    closing_day: int
    due_day: int
    current_invoice_month: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class InvoiceResponse(BaseModel):
    """Response for GET /v1/credit-cards/{id}/invoice"""

    model_config = ConfigDict(from_attributes=True)

    card: CreditCardResponse
    invoice_month: str
    transactions: List[TransactionResponse]
    total: Decimal
    available_limit: Decimal


# Accounts


class AccountCreateRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    name: str
    type: str = Field(..., description="checking, savings, investment or cash")
    initial_balance: Decimal = Decimal("0")
    current_balance: Optional[Decimal] = Field(None, description="Defaults to initial_balance")


class AccountUpdateRequest(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    initial_balance: Optional[Decimal] = None
    current_balance: Optional[Decimal] = None


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    name: str
    type: str
    initial_balance: Decimal
    current_balance: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Investments


class InvestmentCreateRequest(BaseModel):
    """Request body for POST /v1/investments"""

    user_id: str = Field(..., min_length=1)
    type: str = Field(..., description="stock, fund, crypto or pension")
    asset_name: str
    amount_invested: Decimal
    purchase_date: CalendarDate
    current_value: Optional[Decimal] = Field(None, description="Defaults to amount_invested")


class InvestmentUpdateRequest(BaseModel):
    type: Optional[str] = None
    asset_name: Optional[str] = None
    amount_invested: Optional[Decimal] = None
    current_value: Optional[Decimal] = None
    purchase_date: Optional[CalendarDate] = None


class InvestmentResponse(BaseModel):
    id: uuid.UUID
    user_id: str
    type: str
    asset_name: str
    amount_invested: Decimal
    current_value: Decimal
    purchase_date: date
    return_amount: Decimal
    return_percentage: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class InvestmentSummary(BaseModel):
    total_invested: Decimal
    total_current_value: Decimal
    total_return: Decimal
    total_return_percentage: Decimal
    count: int


class InvestmentListResponse(BaseModel):
    """Response for GET /v1/investments"""

    investments: List[InvestmentResponse]
    summary: InvestmentSummary


# Reports


class MonthlyReportResponse(BaseModel):
    """Response for GET /v1/reports/monthly"""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    year: int
    month: int
    first_day: date
    last_day: date
    income: Decimal
    expenses: Decimal
    net_balance: Decimal
    expenses_by_category: Dict[str, Decimal]
    income_by_category: Dict[str, Decimal]
    total_account_balance: Decimal
    transaction_count: int
    account_count: int
