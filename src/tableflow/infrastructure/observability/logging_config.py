from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace

from tableflow.api.middleware.request_id import get_request_id

_LOGGING_CONFIGURED = False

# Structured fields the lifecycle, persistence and access loggers pass via ``extra``.
_EXTRA_KEYS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "operation",
    "order_id",
    "table_id",
    "user_id",
    "item_count",
    "is_paid",
    "payment_method",
    "payment_amount",
    "from_status",
    "to_status",
    "error_kind",
    "error_code",
    "reason",
    "event_type",
    "channel",
    "receivers",
)

# The access middleware already logs every request once.
_QUIET_LOGGERS = ("uvicorn.access",)


def _trace_fields() -> tuple[str | None, str | None]:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None, None
    return format(span_context.trace_id, "032x"), format(span_context.span_id, "016x")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, correlated by request id and trace id."""

    def format(self, record: logging.LogRecord) -> str:
        trace_id, span_id = _trace_fields()
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": get_request_id(),
            "trace_id": trace_id,
            "span_id": span_id,
        }
        for key in _EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        if record.exc_info:
            payload["exception_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def _formatter() -> logging.Formatter:
    if os.getenv("LOG_FORMAT", "json").lower() == "text":
        return logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    return JsonFormatter()


def configure_logging() -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_formatter())
    root_logger.addHandler(handler)
    root_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
