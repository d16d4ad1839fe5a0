"""JSON logging for the API process and Celery workers."""

from __future__ import annotations

import logging
import sys
from typing import IO, Any, Optional

from opentelemetry import trace
from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
RENAMED_FIELDS = {"asctime": "timestamp", "levelname": "level"}

# Third-party loggers held at WARNING; uvicorn access lines duplicate ours
QUIET_LOGGERS = ("botocore", "boto3", "httpx", "urllib3", "celery.redirected")


class OTelJSONFormatter(jsonlogger.JsonFormatter):
    """Adds the active span's trace_id/span_id to every JSON record."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = str(log_record.get("level") or record.levelname).upper()

        ctx = trace.get_current_span().get_span_context()
        if ctx.is_valid:
            log_record["trace_id"] = trace.format_trace_id(ctx.trace_id)
            log_record["span_id"] = trace.format_span_id(ctx.span_id)


def build_formatter() -> OTelJSONFormatter:
    return OTelJSONFormatter(LOG_FORMAT, rename_fields=RENAMED_FIELDS)


def setup_logging(level: str = "INFO", stream: Optional[IO[str]] = None) -> None:
    """Send all records through a single JSON handler on stdout (or `stream`)."""
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(build_formatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())

    logging.getLogger("uvicorn.access").disabled = True
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
