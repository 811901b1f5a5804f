"""Investment positions and their returns"""

import dataclasses
import uuid
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from household_finance.domain.exceptions import NotFoundError, ValidationError
from household_finance.domain.models import INVESTMENT_TYPES, Investment, InvestmentPatch, InvestmentPortfolio
from household_finance.domain.repositories import InvestmentRepository
from household_finance.utils.date_utils import to_calendar_date
from household_finance.utils.money import money_error

PERCENT = Decimal("0.01")


def investment_return(amount_invested: Decimal, current_value: Decimal) -> Decimal:
    """Absolute gain (negative for a loss)"""
    return current_value - amount_invested


def return_percentage(amount_invested: Decimal, current_value: Decimal) -> Decimal:
    """
    Gain as a percentage of the amount invested, rounded half-up to 2 places.

    Example:
        invested 1000.00, now worth 1123.45 -> Decimal("12.35")

    Nothing invested means no meaningful percentage, so 0 is returned
    instead of dividing by zero.
    """
    if amount_invested == 0:
        return Decimal("0.00")
    ratio = investment_return(amount_invested, current_value) / amount_invested * 100
    return ratio.quantize(PERCENT, rounding=ROUND_HALF_UP)


def summarize_investments(investments: List[Investment]) -> InvestmentPortfolio:
    total_invested = sum((i.amount_invested for i in investments), Decimal("0"))
    total_current_value = sum((i.current_value for i in investments), Decimal("0"))
    return InvestmentPortfolio(
        investments=investments,
        total_invested=total_invested,
        total_current_value=total_current_value,
        total_return=investment_return(total_invested, total_current_value),
        total_return_percentage=return_percentage(total_invested, total_current_value),
    )


def _validate_investment_fields(values: Dict[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    if "asset_name" in values and not (isinstance(values["asset_name"], str) and values["asset_name"].strip()):
        errors["asset_name"] = "is required"
    if "type" in values and values["type"] not in INVESTMENT_TYPES:
        errors["type"] = "must be one of: " + ", ".join(INVESTMENT_TYPES)

    if "amount_invested" in values:
        amount = values["amount_invested"]
        if amount is None or not amount.is_finite() or amount <= 0:
            errors["amount_invested"] = "must be greater than zero"
        elif money_error(amount):
            errors["amount_invested"] = money_error(amount)

    if "current_value" in values:
        value = values["current_value"]
        if value is None:
            errors["current_value"] = "cannot be cleared"
        elif not value.is_finite() or value < 0:
            errors["current_value"] = "must not be negative"
        elif money_error(value):
            errors["current_value"] = money_error(value)

    if "purchase_date" in values and values["purchase_date"] is None:
        errors["purchase_date"] = "is required"

    return errors


def build_investment(
    user_id: str,
    type: str,
    asset_name: str,
    amount_invested: Decimal,
    purchase_date: date,
    current_value: Optional[Decimal] = None,
) -> Investment:
    """New position; current_value starts at amount_invested unless given"""
    values = {
        "type": type,
        "asset_name": asset_name,
        "amount_invested": amount_invested,
        "purchase_date": purchase_date,
    }
    if current_value is not None:
        values["current_value"] = current_value
    errors = _validate_investment_fields(values)
    if errors:
        raise ValidationError(errors)

    return Investment(
        user_id=user_id,
        type=type,
        asset_name=asset_name.strip(),
        amount_invested=amount_invested,
        current_value=amount_invested if current_value is None else current_value,
        purchase_date=to_calendar_date(purchase_date),
    )


class InvestmentService:
    def __init__(self, investments: InvestmentRepository):
        self.investments = investments

    def create_investment(
        self,
        user_id: str,
        type: str,
        asset_name: str,
        amount_invested: Decimal,
        purchase_date: date,
        current_value: Optional[Decimal] = None,
    ) -> Investment:
        investment = build_investment(user_id, type, asset_name, amount_invested, purchase_date, current_value)
        return self.investments.save(investment)

    def get_investment(self, investment_id: uuid.UUID) -> Investment:
        investment = self.investments.find_by_id(investment_id)
        if investment is None:
            raise NotFoundError(f"Investment {investment_id} not found", code="InvestmentNotFound")
        return investment

    def list_investments(self, user_id: str, investment_type: Optional[str] = None) -> InvestmentPortfolio:
        """Newest purchases first, with totals over the listed positions"""
        return summarize_investments(self.investments.list_by_user(user_id, investment_type))

    def update_investment(self, investment_id: uuid.UUID, patch: InvestmentPatch) -> Investment:
        investment = self.get_investment(investment_id)
        updates = patch.provided()
        errors = _validate_investment_fields(updates)
        if errors:
            raise ValidationError(errors)
        if "asset_name" in updates:
            updates["asset_name"] = updates["asset_name"].strip()
        if "purchase_date" in updates:
            updates["purchase_date"] = to_calendar_date(updates["purchase_date"])
        return self.investments.save(dataclasses.replace(investment, **updates))

    def delete_investment(self, investment_id: uuid.UUID) -> None:
        if not self.investments.delete_by_id(investment_id):
            raise NotFoundError(f"Investment {investment_id} not found", code="InvestmentNotFound")
