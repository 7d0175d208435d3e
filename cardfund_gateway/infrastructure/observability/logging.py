"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger.json import JsonFormatter


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "cardfund-gateway"


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_simulation(
    request_id: str,
    user_id: str,
    can_afford: bool,
    installment_amount: float,
    suggested_monthly_contribution: float | None,
    duration_ms: float,
) -> None:
    """Log structured simulation outcome for analysis"""
    logging.info(
        "Simulation completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "simulation_complete",
            "affordability_outcome": "affordable" if can_afford else "unaffordable",
            "installment_amount": installment_amount,
            "suggested_monthly_contribution": suggested_monthly_contribution,
            "duration_ms": duration_ms,
        },
    )


def log_expense_event(request_id: str, user_id: str, expense_id: str, event: str) -> None:
    """Log a committed change to an expense"""
    logging.info(
        f"Expense {event}",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "expense_id": expense_id,
            "step": f"expense_{event}",
        },
    )
