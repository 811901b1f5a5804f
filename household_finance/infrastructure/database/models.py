"""SQLAlchemy ORM models"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    # Microsecond precision keeps insertion order usable as a sort tiebreaker
    return datetime.now(timezone.utc)


class CreditCardRecord(Base):
    """Credit card with billing cycle days"""

    __tablename__ = "credit_card"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    limit = Column(Numeric(12, 2), nullable=False)
    closing_day = Column(Integer, nullable=False)
    due_day = Column(Integer, nullable=False)
    current_invoice_month = Column(String(7), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("closing_day BETWEEN 1 AND 31", name="ck_credit_card_closing_day"),
        CheckConstraint("due_day BETWEEN 1 AND 31", name="ck_credit_card_due_day"),
        Index("ix_credit_card_user_invoice", "user_id", "current_invoice_month"),
    )


class AccountRecord(Base):
    """Bank account"""

    __tablename__ = "account"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    initial_balance = Column(Numeric(12, 2), nullable=False, default=0)
    current_balance = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)


class InvestmentRecord(Base):
    """Investment position"""

    __tablename__ = "investment"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)
    asset_name = Column(Text, nullable=False)
    amount_invested = Column(Numeric(12, 2), nullable=False)
    current_value = Column(Numeric(12, 2), nullable=False)
    purchase_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("amount_invested > 0", name="ck_investment_amount_invested"),
        CheckConstraint("current_value >= 0", name="ck_investment_current_value"),
        Index("ix_investment_user_type", "user_id", "type"),
        Index("ix_investment_user_purchase_date", "user_id", "purchase_date"),
    )


class TransactionRecord(Base):
    """Income or expense against one account or one credit card"""

    __tablename__ = "ledger_transaction"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(Uuid, ForeignKey("account.id"), nullable=True, index=True)
    credit_card_id = Column(Uuid, ForeignKey("credit_card.id"), nullable=True)
    type = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=True)
    transaction_date = Column(Date, nullable=False)
    invoice_month = Column(String(7), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint(
            "(account_id IS NULL) <> (credit_card_id IS NULL)",
            name="ck_ledger_transaction_one_payment_source",
        ),
        Index("ix_ledger_transaction_card_invoice", "credit_card_id", "invoice_month"),
        Index("ix_ledger_transaction_user_date", "user_id", "transaction_date"),
    )
