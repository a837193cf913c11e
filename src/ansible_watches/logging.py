from __future__ import annotations

import json
import logging
import sys
from typing import Any

# Attributes every LogRecord carries; anything else was passed via `extra`
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime", "taskName"}

_STRUCTURED_FIELDS = ("gvk", "path", "event", "reason")


class StructuredJSONFormatter(logging.Formatter):
    """Formatter that renders each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES and key not in _STRUCTURED_FIELDS:
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_structured_logging(level: str | int = logging.INFO) -> None:
    """Configure the root logger to emit structured JSON on stdout."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredJSONFormatter())
    root_logger.addHandler(handler)

    # kopf logs through its own logger; keep it at the same level
    logging.getLogger("kopf").setLevel(level)


class StructuredLogger:
    """Logger that attaches watch-related fields to log records."""

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    def _log_with_fields(
        self,
        level: int,
        message: str,
        gvk: Any = None,
        path: str | None = None,
        event: str | None = None,
        reason: str | None = None,
        **kwargs: Any,
    ) -> None:
        extra: dict[str, Any] = {}
        if gvk is not None:
            extra["gvk"] = str(gvk)
        if path is not None:
            extra["path"] = path
        if event is not None:
            extra["event"] = event
        if reason is not None:
            extra["reason"] = reason
        extra.update(kwargs)

        self._logger.log(level, message, extra=extra)

    def info(
        self,
        message: str,
        gvk: Any = None,
        path: str | None = None,
        event: str | None = None,
        reason: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._log_with_fields(logging.INFO, message, gvk, path, event, reason, **kwargs)

    def error(
        self,
        message: str,
        gvk: Any = None,
        path: str | None = None,
        event: str | None = None,
        reason: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._log_with_fields(logging.ERROR, message, gvk, path, event, reason, **kwargs)

    def warning(
        self,
        message: str,
        gvk: Any = None,
        path: str | None = None,
        event: str | None = None,
        reason: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._log_with_fields(logging.WARNING, message, gvk, path, event, reason, **kwargs)

    def debug(
        self,
        message: str,
        gvk: Any = None,
        path: str | None = None,
        event: str | None = None,
        reason: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._log_with_fields(logging.DEBUG, message, gvk, path, event, reason, **kwargs)


# Global logger instance
logger = StructuredLogger("ansible-watches")
