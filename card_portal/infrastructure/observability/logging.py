"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger.json import JsonFormatter

from card_portal.config import settings
from card_portal.domain.models import TransactionStatistics


class CustomJsonFormatter(JsonFormatter):
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


def log_statistics(
    request_id: str,
    scope: str,
    subject: str,
    stats: TransactionStatistics,
    duration_ms: float,
) -> None:
    """Log structured statistics outcome for dashboard analysis"""
    logging.getLogger("card_portal.statistics").info(
        "Statistics computed",
        extra={
            "request_id": request_id,
            "step": "statistics_complete",
            "scope": scope,
            "subject": subject,
            "total_transactions": stats.total_transactions,
            "total_spent": str(stats.total_spent),
            "total_paid": str(stats.total_paid),
            "pending_amount": str(stats.pending_amount),
            "duration_ms": duration_ms,
        },
    )


def log_remote_failure(operation: str, error: Exception, request_id: str = "unknown") -> None:
    """Log a remote API failure surfaced to the caller"""
    logging.getLogger("card_portal.clients").warning(
        f"Portal API call failed: {error}",
        extra={
            "request_id": request_id,
            "operation": operation,
            "error_type": type(error).__name__,
            "status_code": getattr(error, "status_code", None),
        },
    )
