"""Checks for amounts stored in the Numeric(12, 2) money columns"""

from decimal import Decimal
from typing import Optional

CENT = Decimal("0.01")
MAX_MONEY = Decimal("9999999999.99")


def money_error(amount: Decimal) -> Optional[str]:
    """
    Why ``amount`` cannot be stored as money, or None when it can.

    Sub-cent digits are rejected rather than rounded away, so 0.001 never
    lands in the database as 0.00.
    """
    if not amount.is_finite():
        return "must be a finite number"
    if abs(amount) > MAX_MONEY:
        return f"must not exceed {MAX_MONEY}"
    if amount != amount.quantize(CENT):
        return "must have at most 2 decimal places"
    return None
