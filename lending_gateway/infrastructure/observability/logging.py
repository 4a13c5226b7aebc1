"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger.json import JsonFormatter
from lending_gateway.config import settings

# Business events go through one named logger so they can be routed separately
event_logger = logging.getLogger("lending_gateway.events")

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = {
    "passlib": logging.ERROR,
    "sqlalchemy.engine": logging.WARNING,
}


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter stamping timestamp, level and service name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Send every record to stdout as one JSON object per line"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def _log_event(message: str, step: str, request_id: str, **fields: Any) -> None:
    event_logger.info(message, extra={"request_id": request_id, "step": step, **fields})


def log_loan_application(
    request_id: str,
    user_id: str,
    loan_id: str,
    loan_purpose: str,
    loan_amount: float,
    interest_rate: float,
    duration_ms: float,
) -> None:
    """Log one submitted application"""
    _log_event(
        "Loan application submitted",
        "loan_application",
        request_id,
        user_id=user_id,
        loan_id=loan_id,
        loan_purpose=loan_purpose,
        loan_amount=loan_amount,
        interest_rate=interest_rate,
        duration_ms=duration_ms,
    )


def log_credit_report(
    request_id: str,
    user_id: str,
    credit_score: int,
    score_range: str,
    open_accounts: int,
    duration_ms: float,
) -> None:
    """Log a generated credit report for score distribution analysis"""
    _log_event(
        "Credit report generated",
        "credit_report",
        request_id,
        user_id=user_id,
        credit_score=credit_score,
        score_range=score_range,
        open_accounts=open_accounts,
        duration_ms=duration_ms,
    )


def log_status_change(request_id: str, loan_id: str, previous: str, new: str, actor_id: str) -> None:
    _log_event(
        "Loan status changed",
        "status_change",
        request_id,
        loan_id=loan_id,
        previous_status=previous,
        new_status=new,
        actor_id=actor_id,
    )


def log_payment_recorded(request_id: str, loan_id: str, amount: float, outcome: str, actor_id: str) -> None:
    _log_event(
        "Loan payment recorded",
        "payment_recorded",
        request_id,
        loan_id=loan_id,
        amount=amount,
        outcome=outcome,
        actor_id=actor_id,
    )
