"""Structured logging for the Buzza backend.

Every record can carry a ``data`` mapping (via :class:`ContextLogger`) and
picks up the per-request fields stored in :data:`request_context` by the
request middleware. Values under sensitive keys are redacted before any
formatter sees them.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, Dict, Optional, Set

request_context: ContextVar[Dict[str, Any]] = ContextVar("request_context", default={})

SENSITIVE_KEYS: Set[str] = {
    "authorization",
    "cookie",
    "set-cookie",
    "token",
    "session_token",
    "password",
    "secret",
}

REDACTED = "<REDACTED>"

# Request fields copied from the context onto every record
_CONTEXT_FIELDS = ("request_id", "method", "path")


def redact_sensitive_data(data: Any) -> Any:
    """Recursively replace values of sensitive keys with a placeholder."""
    if isinstance(data, dict):
        return {
            key: REDACTED
            if isinstance(key, str) and key.lower() in SENSITIVE_KEYS
            else redact_sensitive_data(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact_sensitive_data(item) for item in data]
    return data


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, UTC)


def _record_data(record: logging.LogRecord) -> Optional[Any]:
    data = getattr(record, "data", None)
    return redact_sensitive_data(data) if data else None


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": _record_time(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        ctx = request_context.get()
        for field in _CONTEXT_FIELDS:
            if ctx.get(field) is not None:
                payload[field] = ctx[field]

        data = _record_data(record)
        if data is not None:
            payload["data"] = data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Pipe-separated, colored output for local development."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname, "")
        request_id = (request_context.get().get("request_id") or "-")[:8]
        parts = [
            _record_time(record).strftime("%Y-%m-%d %H:%M:%S"),
            f"{color}{record.levelname:8}{self.RESET}",
            request_id,
            record.name,
            record.getMessage(),
        ]
        data = _record_data(record)
        if data is not None:
            parts.append(str(data))

        line = " | ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that accepts a ``data`` mapping on every call."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        data = kwargs.pop("data", None)
        if data is not None:
            kwargs["extra"] = {**kwargs.get("extra", {}), "data": data}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    return ContextLogger(logging.getLogger(name), {})


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Install handlers on the root logger, replacing any existing ones.

    The console uses JSON when ``json_output`` is set; the optional log file
    is always JSON.
    """
    root = logging.getLogger()
    root.setLevel(logging.getLevelName(level.upper()))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(StructuredFormatter() if json_output else ConsoleFormatter())
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        root.addHandler(file_handler)

    # request lines come from our own middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
