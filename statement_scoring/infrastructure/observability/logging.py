"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from statement_scoring.config import settings


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


def log_pipeline_run(
    statement_format: str,
    record_count: int,
    transaction_count: int,
    duration_ms: float,
) -> None:
    """Log structured extraction-to-analysis outcome"""
    logging.info(
        "Statement analyzed",
        extra={
            "step": "pipeline_complete",
            "statement_format": statement_format,
            "record_count": record_count,
            "transaction_count": transaction_count,
            "dropped_count": record_count - transaction_count,
            "duration_ms": duration_ms,
        },
    )


def log_eligibility(eligible: bool, score: int, risk_tier: str, recommended_amount: int) -> None:
    """Log structured eligibility outcome for analysis"""
    logging.info(
        "Eligibility scored",
        extra={
            "step": "eligibility_complete",
            "eligibility_outcome": "eligible" if eligible else "ineligible",
            "score": score,
            "risk_tier": risk_tier,
            "recommended_amount": recommended_amount,
        },
    )
