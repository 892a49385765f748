"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from budmate_gateway.config import settings
from budmate_gateway.domain.models import BudgetHealthResult


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging on stdout"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Replace handlers installed by earlier configuration
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_budget_health(request_id: str, result: BudgetHealthResult, duration_ms: float) -> None:
    """Log structured budget health outcome for analysis"""
    logging.info(
        "Budget health served",
        extra={
            "request_id": request_id,
            "user_id": result.user_id,
            "step": "budget_health_complete",
            "percentage_used": round(result.percentage_used, 2),
            "is_over_budget": result.is_over_budget,
            "should_alert": result.should_alert,
            "remaining_amount": str(result.remaining_amount),
            "duration_ms": duration_ms,
        },
    )


def log_ledger_operation(request_id: str, user_id: str, operation: str, amount: Any) -> None:
    """Log a budget or expense mutation"""
    logging.info(
        f"Ledger operation: {operation}",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": operation,
            "amount": str(amount),
        },
    )
