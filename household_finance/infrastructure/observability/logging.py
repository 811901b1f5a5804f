"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from household_finance.domain.models import InvoiceSummary, Transaction


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = "household-finance", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "household-finance") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_transaction_event(request_id: str, action: str, transaction: Transaction) -> None:
    """Log a transaction write with its payment source and invoice assignment"""
    logging.info(
        "Transaction %s",
        action,
        extra={
            "request_id": request_id,
            "user_id": transaction.user_id,
            "step": f"transaction_{action}",
            "transaction_id": str(transaction.id),
            "payment_source": transaction.payment_source,
            "invoice_month": transaction.invoice_month,
        },
    )


def log_invoice_lookup(request_id: str, invoice: InvoiceSummary) -> None:
    logging.info(
        "Invoice computed",
        extra={
            "request_id": request_id,
            "step": "invoice_lookup",
            "card_id": str(invoice.card.id),
            "invoice_month": invoice.invoice_month,
            "transaction_count": len(invoice.transactions),
            "over_limit": invoice.available_limit < 0,
        },
    )
