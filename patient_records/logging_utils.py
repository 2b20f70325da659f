"""JSON logging for the patient records service.

Every record carries the service name and the id of the request it was
emitted under. Values passed through ``extra=`` are copied into the JSON
document unless they collide with a built-in ``LogRecord`` attribute.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_request_id_ctx_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

# Attribute names every LogRecord has; anything else on a record came from ``extra``.
RESERVED_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "request_id", "service"}


class RequestContextFilter(logging.Filter):
    """Stamp records with the current request id and the service name."""

    def __init__(self, service: str) -> None:
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id_ctx_var.get()
        record.service = self.service
        return True


class JSONLogFormatter(logging.Formatter):
    """One JSON object per line, timestamps in UTC with milliseconds."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "service": getattr(record, "service", None),
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        log_entry.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in RESERVED_ATTRIBUTES and not key.startswith("_")
        )
        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


_configured = False


def configure_logging(level: int | str = logging.INFO, service: str = "patient-records") -> None:
    """Route the root logger, uvicorn included, through the JSON formatter."""

    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONLogFormatter())
    handler.addFilter(RequestContextFilter(service))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(logger_name)
        logger.handlers = []
        logger.propagate = True

    _configured = True


__all__ = [
    "JSONLogFormatter",
    "RESERVED_ATTRIBUTES",
    "RequestContextFilter",
    "configure_logging",
    "_request_id_ctx_var",
]
