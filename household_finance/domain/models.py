"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

TRANSACTION_TYPES = ("income", "expense")
ACCOUNT_TYPES = ("checking", "savings", "investment", "cash")
INVESTMENT_TYPES = ("stock", "fund", "crypto", "pension")


class _Unset:
    """Marker for patch fields the caller did not send (distinct from an explicit None)"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


class _Patch:
    """Mixin for merge-patch dataclasses"""

    def provided(self) -> Dict[str, Any]:
        """Fields the caller actually sent, explicit None included"""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}


@dataclass
class CreditCard:
    """Credit card with its billing cycle"""

    user_id: str
    name: str
    limit: Decimal
    closing_day: int
    due_day: int
    current_invoice_month: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class CreditCardPatch(_Patch):
    name: Any = UNSET
    limit: Any = UNSET
    closing_day: Any = UNSET
    due_day: Any = UNSET
    current_invoice_month: Any = UNSET


@dataclass
class Account:
    """Bank account, the alternative payment source to a credit card"""

    user_id: str
    name: str
    type: str  # checking | savings | investment | cash
    initial_balance: Decimal
    current_balance: Decimal
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class AccountPatch(_Patch):
    name: Any = UNSET
    type: Any = UNSET
    initial_balance: Any = UNSET
    current_balance: Any = UNSET


@dataclass
class Investment:
    """Position in a stock, fund, crypto asset or pension plan"""

    user_id: str
    type: str  # stock | fund | crypto | pension
    asset_name: str
    amount_invested: Decimal
    current_value: Decimal
    purchase_date: date
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class InvestmentPatch(_Patch):
    type: Any = UNSET
    asset_name: Any = UNSET
    amount_invested: Any = UNSET
    current_value: Any = UNSET
    purchase_date: Any = UNSET


@dataclass
class Transaction:
    """Income or expense paid from exactly one account or credit card"""

    user_id: str
    type: str  # "income" or "expense"
    category: str
    amount: Decimal
    transaction_date: date
    account_id: Optional[uuid.UUID] = None
    credit_card_id: Optional[uuid.UUID] = None
    invoice_month: Optional[str] = None  # set iff credit_card_id is set
    description: Optional[str] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def payment_source(self) -> str:
        return "credit_card" if self.credit_card_id is not None else "account"


@dataclass
class TransactionInput:
    """Unvalidated fields for a new transaction"""

    user_id: str
    type: str
    category: str
    amount: Decimal
    transaction_date: Optional[date] = None
    account_id: Optional[uuid.UUID] = None
    credit_card_id: Optional[uuid.UUID] = None
    description: Optional[str] = None


@dataclass
class TransactionPatch(_Patch):
    """Partial update: UNSET keeps the stored value, None clears it"""

    type: Any = UNSET
    category: Any = UNSET
    amount: Any = UNSET
    description: Any = UNSET
    transaction_date: Any = UNSET
    account_id: Any = UNSET
    credit_card_id: Any = UNSET
    invoice_month: Any = UNSET


@dataclass
class InvoiceSummary:
    """One billing cycle of a credit card"""

    card: CreditCard
    invoice_month: str
    transactions: List[Transaction]
    total: Decimal
    available_limit: Decimal  # negative when over the limit


@dataclass
class MonthlyReport:
    """Income and expenses for one calendar month"""

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


@dataclass
class InvestmentPortfolio:
    """A user's investments with aggregate performance"""

    investments: List[Investment]
    total_invested: Decimal
    total_current_value: Decimal
    total_return: Decimal
    total_return_percentage: Decimal
