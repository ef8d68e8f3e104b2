"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from finance_ledger.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_balance_change(
    owner_id: str,
    account_id: int,
    direction: str,
    amount: Decimal,
    new_balance: Decimal,
) -> None:
    """Log a balance mutation applied in the current unit of work"""
    logging.info(
        "Account balance changed",
        extra={
            "owner_id": owner_id,
            "account_id": account_id,
            "step": "balance_change",
            "direction": direction,
            "amount": str(amount),
            "new_balance": str(new_balance),
        },
    )


def log_loan_payment(
    owner_id: str,
    loan_id: int,
    amount: Decimal,
    remaining_amount: Decimal,
    status: str,
) -> None:
    """Log a payment applied to a loan"""
    logging.info(
        "Loan payment recorded",
        extra={
            "owner_id": owner_id,
            "loan_id": loan_id,
            "step": "loan_payment",
            "amount": str(amount),
            "remaining_amount": str(remaining_amount),
            "loan_status": status,
        },
    )


def log_due_processing(
    owner_id: str,
    examined: int,
    paid: int,
    failed: int,
    duration_ms: float,
) -> None:
    """Log outcome of a due recurring expense batch"""
    logging.info(
        "Due recurring expenses processed",
        extra={
            "owner_id": owner_id,
            "step": "process_due",
            "examined": examined,
            "paid": paid,
            "failed": failed,
            "duration_ms": duration_ms,
        },
    )
