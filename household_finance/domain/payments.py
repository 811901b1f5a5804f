"""Payment source validation and invoice month assignment for transactions"""

import dataclasses
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional

from household_finance.domain.exceptions import NotFoundError, ValidationError
from household_finance.domain.invoices import calculate_invoice_month
from household_finance.domain.models import (
    TRANSACTION_TYPES,
    Transaction,
    TransactionInput,
    TransactionPatch,
)
from household_finance.domain.repositories import AccountRepository, CreditCardRepository
from household_finance.utils.date_utils import is_valid_month_label, to_calendar_date
from household_finance.utils.money import money_error

logger = logging.getLogger(__name__)

MUTUALLY_EXCLUSIVE = "MutuallyExclusivePaymentSource"
BOTH_SOURCES_MESSAGE = "set either account_id or credit_card_id, not both"
NO_SOURCE_MESSAGE = "one of account_id or credit_card_id is required"


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _check_amount(value: Any, errors: Dict[str, str]) -> Optional[Decimal]:
    amount = _to_decimal(value)
    if amount is None or not amount.is_finite() or amount <= 0:
        errors["amount"] = "must be greater than zero"
        return None
    problem = money_error(amount)
    if problem:
        errors["amount"] = problem
        return None
    return amount


def _check_type(value: Any, errors: Dict[str, str]) -> None:
    if value not in TRANSACTION_TYPES:
        errors["type"] = "must be one of: income, expense"


def _check_category(value: Any, errors: Dict[str, str]) -> Optional[str]:
    category = value.strip() if isinstance(value, str) else ""
    if not category:
        errors["category"] = "is required"
        return None
    return category


class TransactionPaymentAssigner:
    """
    Keeps a transaction's payment source and invoice month consistent.

    Invariants enforced before anything is persisted:
    - exactly one of account_id / credit_card_id is set
    - invoice_month is set iff credit_card_id is set, computed from the
      card's closing day when the card or the date was last set

    Every input violation is collected and reported in a single ValidationError.
    Missing cards/accounts raise NotFoundError so callers can tell them apart.
    """

    def __init__(
        self,
        cards: CreditCardRepository,
        accounts: AccountRepository,
        today: Callable[[], date] = date.today,
    ):
        self.cards = cards
        self.accounts = accounts
        self.today = today

    def prepare_create(self, data: TransactionInput) -> Transaction:
        errors: Dict[str, str] = {}
        code = None

        if data.account_id is not None and data.credit_card_id is not None:
            errors["payment_source"] = BOTH_SOURCES_MESSAGE
            code = MUTUALLY_EXCLUSIVE
        elif data.account_id is None and data.credit_card_id is None:
            errors["payment_source"] = NO_SOURCE_MESSAGE

        amount = _check_amount(data.amount, errors)
        _check_type(data.type, errors)
        category = _check_category(data.category, errors)

        if errors:
            raise ValidationError(errors, code=code)

        transaction_date = (
            to_calendar_date(data.transaction_date) if data.transaction_date is not None else self.today()
        )

        invoice_month = None
        if data.credit_card_id is not None:
            invoice_month = self._invoice_month_for(data.credit_card_id, transaction_date)
        else:
            self._ensure_account_exists(data.account_id)

        return Transaction(
            user_id=data.user_id,
            type=data.type,
            category=category,
            amount=amount,
            transaction_date=transaction_date,
            account_id=data.account_id,
            credit_card_id=data.credit_card_id,
            invoice_month=invoice_month,
            description=data.description,
        )

    def prepare_update(self, existing: Transaction, patch: TransactionPatch) -> Transaction:
        """
        Merge ``patch`` into ``existing`` and return the new transaction.

        The invoice month is recomputed only when the resulting card is set and
        either the card or the transaction date changed. Otherwise the stored
        (possibly manually adjusted) invoice month is kept, so later changes to
        a card's closing day never move past transactions.
        """
        errors: Dict[str, str] = {}
        code = None
        updates = patch.provided()

        if updates.get("account_id") is not None and updates.get("credit_card_id") is not None:
            errors["payment_source"] = BOTH_SOURCES_MESSAGE
            code = MUTUALLY_EXCLUSIVE
        else:
            account_id = updates.get("account_id", existing.account_id)
            card_id = updates.get("credit_card_id", existing.credit_card_id)
            if account_id is not None and card_id is not None:
                errors["payment_source"] = BOTH_SOURCES_MESSAGE
                code = MUTUALLY_EXCLUSIVE
            elif account_id is None and card_id is None:
                errors["payment_source"] = NO_SOURCE_MESSAGE

        if "amount" in updates:
            updates["amount"] = _check_amount(updates["amount"], errors)
        if "type" in updates:
            _check_type(updates["type"], errors)
        if "category" in updates:
            updates["category"] = _check_category(updates["category"], errors)
        if "transaction_date" in updates:
            if updates["transaction_date"] is None:
                errors["transaction_date"] = "cannot be cleared"
            else:
                updates["transaction_date"] = to_calendar_date(updates["transaction_date"])
        if updates.get("invoice_month") is not None and not is_valid_month_label(updates["invoice_month"]):
            errors["invoice_month"] = "must be formatted as YYYY-MM"

        if errors:
            raise ValidationError(errors, code=code)

        merged = dataclasses.replace(existing, **updates)

        if merged.credit_card_id is None:
            merged.invoice_month = None
            if merged.account_id != existing.account_id:
                self._ensure_account_exists(merged.account_id)
            return merged

        card_changed = merged.credit_card_id != existing.credit_card_id
        date_changed = merged.transaction_date != existing.transaction_date

        if card_changed or date_changed:
            merged.invoice_month = self._invoice_month_for(merged.credit_card_id, merged.transaction_date)
            logger.debug(
                "Invoice month recomputed",
                extra={"transaction_id": str(existing.id), "invoice_month": merged.invoice_month},
            )
        elif merged.invoice_month is None:
            errors["invoice_month"] = "is required for credit card transactions"
            raise ValidationError(errors)

        return merged

    def _invoice_month_for(self, card_id, transaction_date: date) -> str:
        card = self.cards.find_by_id(card_id)
        if card is None:
            raise NotFoundError(f"Credit card {card_id} not found", code="CreditCardNotFound")
        return calculate_invoice_month(transaction_date, card.closing_day)

    def _ensure_account_exists(self, account_id) -> None:
        if self.accounts.find_by_id(account_id) is None:
            raise NotFoundError(f"Account {account_id} not found", code="AccountNotFound")
