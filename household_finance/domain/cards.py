"""Credit card lifecycle: creation defaults, updates and the deletion guard"""

import dataclasses
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from household_finance.domain.exceptions import CardInUseError, NotFoundError, ValidationError
from household_finance.domain.invoices import InvoiceAggregator
from household_finance.domain.models import CreditCard, CreditCardPatch, InvoiceSummary
from household_finance.domain.repositories import CreditCardRepository, TransactionRepository
from household_finance.utils.date_utils import is_valid_month_label, month_label
from household_finance.utils.money import money_error


def _check_day(value: Any, field: str, errors: Dict[str, str]) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 31:
        errors[field] = "must be between 1 and 31"


def _validate_card_fields(values: Dict[str, Any], creating: bool) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    if "name" in values and not (isinstance(values["name"], str) and values["name"].strip()):
        errors["name"] = "is required"

    if "limit" in values:
        limit = values["limit"]
        if limit is None or not limit.is_finite() or (creating and limit <= 0) or limit < 0:
            errors["limit"] = "must be greater than zero" if creating else "must not be negative"
        elif money_error(limit):
            errors["limit"] = money_error(limit)

    for field in ("closing_day", "due_day"):
        if field in values:
            _check_day(values[field], field, errors)

    month = values.get("current_invoice_month")
    if month is not None and not is_valid_month_label(month):
        errors["current_invoice_month"] = "must be formatted as YYYY-MM"
    elif "current_invoice_month" in values and month is None and not creating:
        errors["current_invoice_month"] = "cannot be cleared"

    return errors


def build_credit_card(
    user_id: str,
    name: str,
    limit: Decimal,
    closing_day: int,
    due_day: int,
    current_invoice_month: Optional[str] = None,
    today: Callable[[], date] = date.today,
) -> CreditCard:
    """
    Validate and construct a new card.

    current_invoice_month defaults to the month of ``today()`` when not given.
    """
    values = {
        "name": name,
        "limit": limit,
        "closing_day": closing_day,
        "due_day": due_day,
        "current_invoice_month": current_invoice_month,
    }
    errors = _validate_card_fields(values, creating=True)
    if errors:
        raise ValidationError(errors)

    return CreditCard(
        user_id=user_id,
        name=name.strip(),
        limit=limit,
        closing_day=closing_day,
        due_day=due_day,
        current_invoice_month=current_invoice_month or month_label(today()),
    )


def apply_card_update(card: CreditCard, patch: CreditCardPatch) -> CreditCard:
    updates = patch.provided()
    errors = _validate_card_fields(updates, creating=False)
    if errors:
        raise ValidationError(errors)

    if "name" in updates:
        updates["name"] = updates["name"].strip()
    return dataclasses.replace(card, **updates)


class CreditCardService:
    """Card CRUD plus invoice lookup"""

    def __init__(
        self,
        cards: CreditCardRepository,
        transactions: TransactionRepository,
        today: Callable[[], date] = date.today,
    ):
        self.cards = cards
        self.transactions = transactions
        self.today = today
        self.aggregator = InvoiceAggregator(cards, transactions)

    def create_card(
        self,
        user_id: str,
        name: str,
        limit: Decimal,
        closing_day: int,
        due_day: int,
        current_invoice_month: Optional[str] = None,
    ) -> CreditCard:
        card = build_credit_card(
            user_id, name, limit, closing_day, due_day, current_invoice_month, today=self.today
        )
        return self.cards.save(card)

    def get_card(self, card_id: uuid.UUID) -> CreditCard:
        card = self.cards.find_by_id(card_id)
        if card is None:
            raise NotFoundError(f"Credit card {card_id} not found", code="CreditCardNotFound")
        return card

    def list_cards(self, user_id: str) -> List[CreditCard]:
        return self.cards.list_by_user(user_id)

    def update_card(self, card_id: uuid.UUID, patch: CreditCardPatch) -> CreditCard:
        # Closing day changes only affect transactions written afterwards
        card = apply_card_update(self.get_card(card_id), patch)
        return self.cards.save(card)

    def delete_card(self, card_id: uuid.UUID) -> None:
        in_use = self.transactions.count_by_card(card_id)
        if in_use:
            raise CardInUseError(f"Credit card {card_id} has {in_use} transaction(s)")
        if not self.cards.delete_by_id(card_id):
            raise NotFoundError(f"Credit card {card_id} not found", code="CreditCardNotFound")

    def get_invoice(self, card_id: uuid.UUID, invoice_month: Optional[str] = None) -> InvoiceSummary:
        """Invoice for ``invoice_month``, or the card's current one when omitted"""
        if invoice_month is None:
            invoice_month = self.get_card(card_id).current_invoice_month
        return self.aggregator.get_invoice(card_id, invoice_month)
