"""Credit card billing cycles: invoice month assignment and invoice totals"""

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from functools import lru_cache

from household_finance.domain.exceptions import NotFoundError, ValidationError
from household_finance.domain.models import InvoiceSummary
from household_finance.domain.repositories import CreditCardRepository, TransactionRepository
from household_finance.utils.date_utils import (
    clamp_day,
    format_month,
    is_valid_month_label,
    month_label,
    next_month,
    to_calendar_date,
)

logger = logging.getLogger(__name__)


def calculate_invoice_month(transaction_date: date | datetime, closing_day: int) -> str:
    """
    Assign a card transaction to the invoice (billing cycle) it belongs to.

    A purchase made on or before the closing day falls in the current month's
    invoice; anything after it rolls to the next month's invoice.

    Closing days past the end of a short month are capped at that month's last
    day, so a card closing on the 31st closes on Feb 28/29 and Apr 30.

    Example (closing day 10):
        2025-06-10 → "2025-06"
        2025-06-11 → "2025-07"
        2025-12-20 → "2026-01"
    """
    if not 1 <= closing_day <= 31:
        raise ValueError(f"closing_day must be between 1 and 31, got {closing_day}")
    return _invoice_month_for_date(to_calendar_date(transaction_date), closing_day)


@lru_cache(maxsize=4096)
def _invoice_month_for_date(day: date, closing_day: int) -> str:
    closing_boundary = clamp_day(day.year, day.month, closing_day)

    if day <= closing_boundary:
        return month_label(day)

    return format_month(*next_month(day.year, day.month))


def ensure_invoice_month(invoice_month: str, field: str = "invoice_month") -> str:
    """Reject anything that is not a YYYY-MM label with month 01-12"""
    if not is_valid_month_label(invoice_month):
        raise ValidationError(
            {field: "must be formatted as YYYY-MM"},
            code="InvalidInvoiceMonth",
        )
    return invoice_month


class InvoiceAggregator:
    """Totals and remaining credit for one card's invoice"""

    def __init__(self, cards: CreditCardRepository, transactions: TransactionRepository):
        self.cards = cards
        self.transactions = transactions

    def get_invoice(self, card_id: uuid.UUID, invoice_month: str) -> InvoiceSummary:
        """
        Raises:
            ValidationError: invoice_month is not YYYY-MM
            NotFoundError: card does not exist
        """
        ensure_invoice_month(invoice_month)

        card = self.cards.find_by_id(card_id)
        if card is None:
            raise NotFoundError(f"Credit card {card_id} not found", code="CreditCardNotFound")

        transactions = self.transactions.find_by_card_and_invoice_month(card_id, invoice_month)
        total = sum((t.amount for t in transactions), Decimal("0"))

        logger.debug(
            "Invoice aggregated",
            extra={"card_id": str(card_id), "invoice_month": invoice_month, "count": len(transactions)},
        )

        # Over-limit is reported as a negative balance, never rejected
        return InvoiceSummary(
            card=card,
            invoice_month=invoice_month,
            transactions=list(transactions),
            total=total,
            available_limit=card.limit - total,
        )
