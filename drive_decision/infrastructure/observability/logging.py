"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from drive_decision.config import settings


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


def log_decision(
    request_id: str,
    decision_id: Optional[str],
    verdict: str,
    confidence: str,
    risk_flag_count: int,
    duration_ms: float,
) -> None:
    """Log structured decision outcome for analysis"""
    logging.info(
        "Decision completed",
        extra={
            "request_id": request_id,
            "decision_id": decision_id,
            "step": "decision_complete",
            "verdict": verdict,
            "confidence": confidence,
            "risk_flag_count": risk_flag_count,
            "duration_ms": duration_ms,
        },
    )


def log_explanation(
    request_id: str,
    source: str,
    fallback_reason: Optional[str],
    duration_ms: float,
) -> None:
    """Log which narrative was served and why the AI one was skipped, if it was"""
    logging.info(
        "Explanation served",
        extra={
            "request_id": request_id,
            "step": "explanation_complete",
            "source": source,
            "fallback_reason": fallback_reason,
            "duration_ms": duration_ms,
        },
    )
