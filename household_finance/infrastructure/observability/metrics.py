"""Prometheus metrics for transaction writes, invoice assignment and errors"""

from prometheus_client import Counter, Histogram
from household_finance.domain.models import Transaction

# Transaction metrics
transaction_write_counter = Counter(
    "household_transaction_writes_total",
    "Transactions written",
    ["action", "payment_source"],  # created | updated, account | credit_card
)

invoice_assignment_counter = Counter(
    "household_invoice_month_assignments_total",
    "Invoice months computed for credit card transactions",
    ["action"],  # created | updated
)

# Invoice metrics
invoice_lookup_counter = Counter(
    "household_invoice_lookups_total",
    "Invoice aggregations served",
    ["over_limit"],  # true | false
)

# Errors surfaced to callers
domain_error_counter = Counter(
    "household_domain_errors_total",
    "Domain errors returned to clients",
    ["error"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transaction_write(action: str, before: Transaction | None, after: Transaction) -> None:
    """Count a write, and an invoice assignment when the invoice month was (re)computed"""
    transaction_write_counter.labels(action=action, payment_source=after.payment_source).inc()

    if after.invoice_month is None:
        return
    if before is None or before.invoice_month != after.invoice_month or before.credit_card_id != after.credit_card_id:
        invoice_assignment_counter.labels(action=action).inc()
