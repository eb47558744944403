"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Sequence

from pythonjsonlogger import jsonlogger

from payment_schedule.config import settings


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


def log_schedule_view(
    request_id: str,
    view_kind: str,
    year: int,
    month: int,
    entry_count: int,
    month_total: int,
    skipped_transaction_ids: Sequence[str],
    cache_hit: bool,
    duration_ms: float,
) -> None:
    """Log one schedule/calendar computation; dangling references are a warning"""
    extra = {
        "request_id": request_id,
        "step": f"{view_kind}_complete",
        "year": year,
        "month": month,
        "entry_count": entry_count,
        "month_total": month_total,
        "skipped_count": len(skipped_transaction_ids),
        "cache_hit": cache_hit,
        "duration_ms": duration_ms,
    }
    logging.info("Schedule view built", extra=extra)

    if skipped_transaction_ids:
        logging.warning(
            "Transactions skipped: account or bank not found",
            extra={
                "request_id": request_id,
                "step": f"{view_kind}_skipped",
                "transaction_ids": list(skipped_transaction_ids),
            },
        )


def log_audit(
    request_id: str,
    total_accounts: int,
    problematic_accounts: int,
    affected_transactions: int,
    duration_ms: float,
) -> None:
    """Log structured audit outcome"""
    logging.info(
        "Configuration audit completed",
        extra={
            "request_id": request_id,
            "step": "audit_complete",
            "total_accounts": total_accounts,
            "problematic_accounts": problematic_accounts,
            "affected_transactions": affected_transactions,
            "duration_ms": duration_ms,
        },
    )
