"""Persistence interfaces consumed by the domain layer.

Implementations live in ``household_finance.infrastructure.database.repositories``.
Every method may raise ``StorageError``; the domain forwards it unchanged.
"""

import uuid
from datetime import date
from typing import List, Optional, Protocol

from household_finance.domain.models import Account, CreditCard, Investment, Transaction


class CreditCardRepository(Protocol):
    def find_by_id(self, card_id: uuid.UUID) -> Optional[CreditCard]: ...

    def list_by_user(self, user_id: str) -> List[CreditCard]: ...

    def save(self, card: CreditCard) -> CreditCard: ...

    def delete_by_id(self, card_id: uuid.UUID) -> bool: ...


class AccountRepository(Protocol):
    def find_by_id(self, account_id: uuid.UUID) -> Optional[Account]: ...

    def list_by_user(self, user_id: str, account_type: Optional[str] = None) -> List[Account]: ...

    def save(self, account: Account) -> Account: ...

    def delete_by_id(self, account_id: uuid.UUID) -> bool: ...


class InvestmentRepository(Protocol):
    def find_by_id(self, investment_id: uuid.UUID) -> Optional[Investment]: ...

    def list_by_user(self, user_id: str, investment_type: Optional[str] = None) -> List[Investment]:
        """Newest purchase_date first"""
        ...

    def save(self, investment: Investment) -> Investment: ...

    def delete_by_id(self, investment_id: uuid.UUID) -> bool: ...


class TransactionRepository(Protocol):
    def find_by_id(self, transaction_id: uuid.UUID) -> Optional[Transaction]: ...

    def find_by_card_and_invoice_month(self, card_id: uuid.UUID, invoice_month: str) -> List[Transaction]:
        """Newest transaction_date first, ties in insertion order"""
        ...

    def list_by_user(
        self,
        user_id: str,
        type: Optional[str] = None,
        category: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Transaction]: ...

    def count_by_card(self, card_id: uuid.UUID) -> int: ...

    def count_by_account(self, account_id: uuid.UUID) -> int: ...

    def save(self, transaction: Transaction) -> Transaction: ...

    def delete_by_id(self, transaction_id: uuid.UUID) -> bool: ...
