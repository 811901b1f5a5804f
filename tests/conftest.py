"""Pytest fixtures for testing"""

import dataclasses
import uuid
import pytest
from datetime import date
from decimal import Decimal
from typing import Dict, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from household_finance.api.main import create_app
from household_finance.api.dependencies import get_clock
from household_finance.infrastructure.database.models import Base
from household_finance.infrastructure.database.session import get_db
from household_finance.domain.models import Account, CreditCard, Investment, Transaction


# Test database: one shared in-memory connection
TEST_DATABASE_URL = "sqlite://"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2025, 6, 15)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a fixed clock"""
    app = create_app(session_factory=TestingSessionLocal)

    def override_get_db():
        try:
            yield db
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: (lambda: TODAY)
    return TestClient(app)


# In-memory repositories for domain unit tests


class InMemoryCreditCardRepository:
    def __init__(self):
        self.items: Dict[uuid.UUID, CreditCard] = {}
        self.lookups = 0

    def find_by_id(self, card_id):
        self.lookups += 1
        card = self.items.get(card_id)
        return dataclasses.replace(card) if card else None

    def list_by_user(self, user_id):
        return [c for c in reversed(list(self.items.values())) if c.user_id == user_id]

    def save(self, card):
        self.items[card.id] = dataclasses.replace(card)
        return card

    def delete_by_id(self, card_id):
        return self.items.pop(card_id, None) is not None


class InMemoryAccountRepository:
    def __init__(self):
        self.items: Dict[uuid.UUID, Account] = {}

    def find_by_id(self, account_id):
        account = self.items.get(account_id)
        return dataclasses.replace(account) if account else None

    def list_by_user(self, user_id, account_type=None):
        return [
            a for a in reversed(list(self.items.values()))
            if a.user_id == user_id and (account_type is None or a.type == account_type)
        ]

    def save(self, account):
        self.items[account.id] = dataclasses.replace(account)
        return account

    def delete_by_id(self, account_id):
        return self.items.pop(account_id, None) is not None


class InMemoryInvestmentRepository:
    def __init__(self):
        self.items: Dict[uuid.UUID, Investment] = {}

    def find_by_id(self, investment_id):
        investment = self.items.get(investment_id)
        return dataclasses.replace(investment) if investment else None

    def list_by_user(self, user_id, investment_type=None):
        return sorted(
            (
                i for i in self.items.values()
                if i.user_id == user_id and (investment_type is None or i.type == investment_type)
            ),
            key=lambda i: i.purchase_date,
            reverse=True,
        )

    def save(self, investment):
        self.items[investment.id] = dataclasses.replace(investment)
        return investment

    def delete_by_id(self, investment_id):
        return self.items.pop(investment_id, None) is not None


class InMemoryTransactionRepository:
    """Keeps insertion order; sorted() is stable so same-day rows stay in that order"""

    def __init__(self):
        self.items: Dict[uuid.UUID, Transaction] = {}
        self.saves = 0
        self.lookups = 0

    def _ordered(self, transactions) -> List[Transaction]:
        return sorted(transactions, key=lambda t: t.transaction_date, reverse=True)

    def find_by_id(self, transaction_id):
        self.lookups += 1
        transaction = self.items.get(transaction_id)
        return dataclasses.replace(transaction) if transaction else None

    def find_by_card_and_invoice_month(self, card_id, invoice_month):
        return self._ordered(
            t for t in self.items.values() if t.credit_card_id == card_id and t.invoice_month == invoice_month
        )

    def list_by_user(self, user_id, type=None, category=None, start_date=None, end_date=None):
        return self._ordered(
            t for t in self.items.values()
            if t.user_id == user_id
            and (type is None or t.type == type)
            and (category is None or t.category == category)
            and (start_date is None or t.transaction_date >= start_date)
            and (end_date is None or t.transaction_date <= end_date)
        )

    def count_by_card(self, card_id):
        return sum(1 for t in self.items.values() if t.credit_card_id == card_id)

    def count_by_account(self, account_id):
        return sum(1 for t in self.items.values() if t.account_id == account_id)

    def save(self, transaction):
        self.saves += 1
        self.items[transaction.id] = dataclasses.replace(transaction)
        return transaction

    def delete_by_id(self, transaction_id):
        return self.items.pop(transaction_id, None) is not None


@pytest.fixture
def card_repo() -> InMemoryCreditCardRepository:
    return InMemoryCreditCardRepository()


@pytest.fixture
def account_repo() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def transaction_repo() -> InMemoryTransactionRepository:
    return InMemoryTransactionRepository()


@pytest.fixture
def investment_repo() -> InMemoryInvestmentRepository:
    return InMemoryInvestmentRepository()


@pytest.fixture
def card(card_repo) -> CreditCard:
    """Card closing on the 10th with a 5000.00 limit"""
    card = CreditCard(
        user_id="user_1",
        name="Visa Gold",
        limit=Decimal("5000.00"),
        closing_day=10,
        due_day=17,
        current_invoice_month="2025-06",
    )
    return card_repo.save(card)


@pytest.fixture
def account(account_repo) -> Account:
    account = Account(
        user_id="user_1",
        name="Checking",
        type="checking",
        initial_balance=Decimal("1000.00"),
        current_balance=Decimal("1000.00"),
    )
    return account_repo.save(account)


def make_transaction(**overrides) -> Transaction:
    """Expense with default fields; callers set the payment source"""
    values = dict(
        user_id="user_1",
        type="expense",
        category="groceries",
        amount=Decimal("10.00"),
        transaction_date=date(2025, 6, 1),
    )
    values.update(overrides)
    return Transaction(**values)


@pytest.fixture
def transaction_factory():
    return make_transaction
