"""Structured JSON logging with service metadata on every record"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

# Held at WARNING or above regardless of the root level
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Adds UTC timestamp, level and the owning service to each record"""

    def __init__(self, *args, service_name: str = "wealthease-insights", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "wealthease-insights") -> None:
    """Route the root logger to stdout as JSON, replacing any prior handlers"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service_name=service_name)
    )
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))


def log_analysis(
    request_id: str,
    source: str,
    transaction_count: int,
    duration_ms: float,
) -> None:
    """Log structured analysis outcome"""
    logging.info(
        "Analysis completed",
        extra={
            "request_id": request_id,
            "step": "analysis_complete",
            "source": source,
            "transaction_count": transaction_count,
            "duration_ms": duration_ms,
        },
    )


def log_extraction(request_id: str, extracted: bool, duration_ms: float) -> None:
    """Log chatbot extraction outcome without the user's message text"""
    logging.info(
        "Chatbot extraction completed",
        extra={
            "request_id": request_id,
            "step": "chatbot_complete",
            "extracted": extracted,
            "duration_ms": duration_ms,
        },
    )
