import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Substrings of structured-data keys whose values never reach the log stream
SENSITIVE_KEYS = ("password", "secret", "token", "authorization")


def redact(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive values masked."""
    clean: dict[str, Any] = {}
    for key, value in data.items():
        if any(s in key.lower() for s in SENSITIVE_KEYS):
            clean[key] = "[REDACTED]"
        elif isinstance(value, dict):
            clean[key] = redact(value)
        else:
            clean[key] = value
    return clean


class StructuredFormatter(logging.Formatter):
    """JSON structured logging formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "extra_data"):
            log_data["data"] = redact(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class StructuredLogger(logging.Logger):
    """Logger that supports structured data."""

    def _log_with_data(
        self,
        level: int,
        msg: str,
        data: dict[str, Any] | None = None,
        *args,
        **kwargs
    ):
        if not self.isEnabledFor(level):
            return
        if data:
            extra = kwargs.get("extra", {})
            extra["extra_data"] = data
            kwargs["extra"] = extra
        super()._log(level, msg, args, **kwargs)

    def debug_with_data(self, msg: str, data: dict[str, Any] | None = None, **kwargs):
        self._log_with_data(logging.DEBUG, msg, data, **kwargs)

    def info_with_data(self, msg: str, data: dict[str, Any] | None = None, **kwargs):
        self._log_with_data(logging.INFO, msg, data, **kwargs)

    def warning_with_data(self, msg: str, data: dict[str, Any] | None = None, **kwargs):
        self._log_with_data(logging.WARNING, msg, data, **kwargs)

    def error_with_data(self, msg: str, data: dict[str, Any] | None = None, **kwargs):
        self._log_with_data(logging.ERROR, msg, data, **kwargs)


# Loggers created at import time must already be StructuredLoggers
logging.setLoggerClass(StructuredLogger)


def setup_logging(debug: bool = False) -> None:
    """Configure structured logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return logging.getLogger(name)  # type: ignore
