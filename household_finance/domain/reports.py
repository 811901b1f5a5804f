"""Monthly income/expense report"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable

from household_finance.domain.exceptions import ValidationError
from household_finance.domain.models import MonthlyReport, Transaction
from household_finance.domain.repositories import AccountRepository, TransactionRepository
from household_finance.utils.date_utils import month_bounds


def _by_category(transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for t in transactions:
        totals[t.category] += t.amount
    return dict(totals)


def build_monthly_report(
    user_id: str,
    year: int,
    month: int,
    transactions: TransactionRepository,
    accounts: AccountRepository,
) -> MonthlyReport:
    """
    Summarize one calendar month by transaction date.

    Card purchases count in the month they were made, not in their invoice month.
    """
    if not 1 <= month <= 12:
        raise ValidationError({"month": "must be between 1 and 12"})

    first_day, last_day = month_bounds(year, month)
    month_transactions = transactions.list_by_user(user_id, start_date=first_day, end_date=last_day)
    user_accounts = accounts.list_by_user(user_id)

    incomes = [t for t in month_transactions if t.type == "income"]
    expenses = [t for t in month_transactions if t.type == "expense"]
    income_total = sum((t.amount for t in incomes), Decimal("0"))
    expense_total = sum((t.amount for t in expenses), Decimal("0"))

    return MonthlyReport(
        user_id=user_id,
        year=year,
        month=month,
        first_day=first_day,
        last_day=last_day,
        income=income_total,
        expenses=expense_total,
        net_balance=income_total - expense_total,
        expenses_by_category=_by_category(expenses),
        income_by_category=_by_category(incomes),
        total_account_balance=sum((a.current_balance for a in user_accounts), Decimal("0")),
        transaction_count=len(month_transactions),
        account_count=len(user_accounts),
    )
