"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List

from pythonjsonlogger import jsonlogger

from savings_core.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str | None = None) -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level or settings.log_level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


logger = logging.getLogger("savings_core")


def log_charge_settled(
    transaction_ref: str,
    charge_ref: str | None,
    fee_amount: Decimal,
    vat_amount: Decimal,
    split_count: int,
    backdated: bool,
) -> None:
    """Log structured charge settlement outcome"""
    logger.info(
        "Charge settled",
        extra={
            "transaction_ref": transaction_ref,
            "charge_ref": charge_ref,
            "step": "charge_settled",
            "fee_amount": str(fee_amount),
            "vat_amount": str(vat_amount),
            "split_count": split_count,
            "backdated": backdated,
        },
    )


def log_account_number_generated(product_type: str, product_id: int, sequence: int, account_number: str) -> None:
    """Log generated account number with the sequence it came from"""
    logger.info(
        "Account number generated",
        extra={
            "step": "account_number_generated",
            "product_type": product_type,
            "product_id": product_id,
            "sequence": sequence,
            "account_number": account_number,
        },
    )


def log_limit_breach(classification_ref: int | None, breaches: List[str], transaction_amount: Decimal) -> None:
    """Log deposit limits a transaction would break"""
    logger.warning(
        "Deposit exceeds classification limits",
        extra={
            "step": "limit_check",
            "classification_ref": classification_ref,
            "breached_limits": breaches,
            "transaction_amount": str(transaction_amount),
        },
    )
