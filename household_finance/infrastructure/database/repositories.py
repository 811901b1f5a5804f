"""Data access layer: SQLAlchemy implementations of the domain repositories"""

import uuid
from contextlib import contextmanager
from datetime import date
from typing import Iterator, List, Optional, Type
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from household_finance.infrastructure.database.models import (
    AccountRecord,
    CreditCardRecord,
    InvestmentRecord,
    TransactionRecord,
)
from household_finance.domain.exceptions import StorageError
from household_finance.domain.models import Account, CreditCard, Investment, Transaction


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        raise StorageError(f"Database error during {operation}: {e.__class__.__name__}") from e


def _copy_fields(source, target, names) -> None:
    for name in names:
        setattr(target, name, getattr(source, name))


class _SqlRepository:
    """Shared upsert/delete for single-table entities"""

    record_class: Type = None
    fields: tuple = ()

    def __init__(self, db: Session):
        self.db = db

    def _to_domain(self, record):
        raise NotImplementedError

    def _find(self, entity_id: uuid.UUID):
        with _storage_errors(f"{self.record_class.__tablename__} lookup"):
            record = self.db.get(self.record_class, entity_id)
        return self._to_domain(record) if record is not None else None

    def _save(self, entity):
        """Insert or overwrite (last write wins)"""
        with _storage_errors(f"{self.record_class.__tablename__} save"):
            record = self.db.get(self.record_class, entity.id)
            if record is None:
                record = self.record_class(id=entity.id)
                self.db.add(record)
            _copy_fields(entity, record, self.fields)
            self.db.flush()  # Apply defaults without committing
            self.db.refresh(record)
        return self._to_domain(record)

    def _delete(self, entity_id: uuid.UUID) -> bool:
        with _storage_errors(f"{self.record_class.__tablename__} delete"):
            record = self.db.get(self.record_class, entity_id)
            if record is None:
                return False
            self.db.delete(record)
            self.db.flush()
        return True


class CreditCardRepository(_SqlRepository):
    """Repository for credit cards"""

    record_class = CreditCardRecord
    fields = ("user_id", "name", "limit", "closing_day", "due_day", "current_invoice_month")

    def _to_domain(self, record: CreditCardRecord) -> CreditCard:
        return CreditCard(
            id=record.id,
            user_id=record.user_id,
            name=record.name,
            limit=record.limit,
            closing_day=record.closing_day,
            due_day=record.due_day,
            current_invoice_month=record.current_invoice_month,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def find_by_id(self, card_id: uuid.UUID) -> Optional[CreditCard]:
        return self._find(card_id)

    def list_by_user(self, user_id: str) -> List[CreditCard]:
        """Newest cards first"""
        with _storage_errors("credit_card list"):
            records = (
                self.db.query(CreditCardRecord)
                .filter(CreditCardRecord.user_id == user_id)
                .order_by(CreditCardRecord.created_at.desc())
                .all()
            )
        return [self._to_domain(r) for r in records]

    def save(self, card: CreditCard) -> CreditCard:
        return self._save(card)

    def delete_by_id(self, card_id: uuid.UUID) -> bool:
        return self._delete(card_id)


class AccountRepository(_SqlRepository):
    """Repository for bank accounts"""

    record_class = AccountRecord
    fields = ("user_id", "name", "type", "initial_balance", "current_balance")

    def _to_domain(self, record: AccountRecord) -> Account:
        return Account(
            id=record.id,
            user_id=record.user_id,
            name=record.name,
            type=record.type,
            initial_balance=record.initial_balance,
            current_balance=record.current_balance,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def find_by_id(self, account_id: uuid.UUID) -> Optional[Account]:
        return self._find(account_id)

    def list_by_user(self, user_id: str, account_type: Optional[str] = None) -> List[Account]:
        with _storage_errors("account list"):
            query = self.db.query(AccountRecord).filter(AccountRecord.user_id == user_id)
            if account_type:
                query = query.filter(AccountRecord.type == account_type)
            records = query.order_by(AccountRecord.created_at.desc()).all()
        return [self._to_domain(r) for r in records]

    def save(self, account: Account) -> Account:
        return self._save(account)

    def delete_by_id(self, account_id: uuid.UUID) -> bool:
        return self._delete(account_id)


class InvestmentRepository(_SqlRepository):
    """Repository for investment positions"""

    record_class = InvestmentRecord
    fields = ("user_id", "type", "asset_name", "amount_invested", "current_value", "purchase_date")

    def _to_domain(self, record: InvestmentRecord) -> Investment:
        return Investment(
            id=record.id,
            user_id=record.user_id,
            type=record.type,
            asset_name=record.asset_name,
            amount_invested=record.amount_invested,
            current_value=record.current_value,
            purchase_date=record.purchase_date,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def find_by_id(self, investment_id: uuid.UUID) -> Optional[Investment]:
        return self._find(investment_id)

    def list_by_user(self, user_id: str, investment_type: Optional[str] = None) -> List[Investment]:
        with _storage_errors("investment list"):
            query = self.db.query(InvestmentRecord).filter(InvestmentRecord.user_id == user_id)
            if investment_type:
                query = query.filter(InvestmentRecord.type == investment_type)
            records = query.order_by(
                InvestmentRecord.purchase_date.desc(), InvestmentRecord.created_at.asc()
            ).all()
        return [self._to_domain(r) for r in records]

    def save(self, investment: Investment) -> Investment:
        return self._save(investment)

    def delete_by_id(self, investment_id: uuid.UUID) -> bool:
        return self._delete(investment_id)


class TransactionRepository(_SqlRepository):
    """Repository for transactions"""

    record_class = TransactionRecord
    fields = (
        "user_id",
        "account_id",
        "credit_card_id",
        "type",
        "category",
        "amount",
        "description",
        "transaction_date",
        "invoice_month",
    )

    def _to_domain(self, record: TransactionRecord) -> Transaction:
        return Transaction(
            id=record.id,
            user_id=record.user_id,
            type=record.type,
            category=record.category,
            amount=record.amount,
            transaction_date=record.transaction_date,
            account_id=record.account_id,
            credit_card_id=record.credit_card_id,
            invoice_month=record.invoice_month,
            description=record.description,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def _ordered(self, query):
        # Newest date first, same-day rows in insertion order
        return query.order_by(TransactionRecord.transaction_date.desc(), TransactionRecord.created_at.asc())

    def find_by_id(self, transaction_id: uuid.UUID) -> Optional[Transaction]:
        return self._find(transaction_id)

    def find_by_card_and_invoice_month(self, card_id: uuid.UUID, invoice_month: str) -> List[Transaction]:
        with _storage_errors("invoice lookup"):
            records = self._ordered(
                self.db.query(TransactionRecord).filter(
                    TransactionRecord.credit_card_id == card_id,
                    TransactionRecord.invoice_month == invoice_month,
                )
            ).all()
        return [self._to_domain(r) for r in records]

    def list_by_user(
        self,
        user_id: str,
        type: Optional[str] = None,
        category: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Transaction]:
        with _storage_errors("transaction list"):
            query = self.db.query(TransactionRecord).filter(TransactionRecord.user_id == user_id)
            if type:
                query = query.filter(TransactionRecord.type == type)
            if category:
                query = query.filter(TransactionRecord.category == category)
            if start_date:
                query = query.filter(TransactionRecord.transaction_date >= start_date)
            if end_date:
                query = query.filter(TransactionRecord.transaction_date <= end_date)
            records = self._ordered(query).all()
        return [self._to_domain(r) for r in records]

    def count_by_card(self, card_id: uuid.UUID) -> int:
        with _storage_errors("transaction count"):
            return self.db.query(TransactionRecord).filter(TransactionRecord.credit_card_id == card_id).count()

    def count_by_account(self, account_id: uuid.UUID) -> int:
        with _storage_errors("transaction count"):
            return self.db.query(TransactionRecord).filter(TransactionRecord.account_id == account_id).count()

    def save(self, transaction: Transaction) -> Transaction:
        return self._save(transaction)

    def delete_by_id(self, transaction_id: uuid.UUID) -> bool:
        return self._delete(transaction_id)
