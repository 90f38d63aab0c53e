"""JSON logging for the transformation, the runtime and the hosts."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import IO, Any

from eventglue.config import settings
from eventglue.exceptions import HostError, TransformError


def _error_fields(exc: BaseException) -> dict[str, Any]:
    """Machine-readable fields for eventglue's own exceptions."""
    if isinstance(exc, TransformError):
        fields: dict[str, Any] = {
            "error_code": exc.error_code,
            "diagnostic": exc.diagnostic(),
        }
        if exc.filename is not None:
            fields["source_file"] = exc.filename
            fields["source_line"] = exc.lineno
        return fields
    if isinstance(exc, HostError):
        return {"error_code": exc.error_code, "status_code": exc.status_code}
    return {"exception_type": type(exc).__name__}


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Fields: timestamp (UTC), level, logger, message, correlation_id when a
    request is in flight, and everything from ``extra={"context": {...}}``.
    Records logged with an exception also carry its traceback; transform
    errors add their error_code and ``path:line`` diagnostic, host errors
    their error_code and status_code.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            log_data.update(context)

        if record.exc_info and record.exc_info[1] is not None:
            log_data.update(_error_fields(record.exc_info[1]))
            log_data["exception"] = self.formatException(record.exc_info)

        if record.levelno == logging.DEBUG:
            log_data["file"] = record.pathname
            log_data["line"] = record.lineno
            log_data["function"] = record.funcName

        # Context values may hold AST nodes or paths
        return json.dumps(log_data, default=str)


def configure_logging(level: str | None = None, stream: IO[str] | None = None) -> None:
    """
    Route all logging through a single JSON handler.

    Args:
        level: Log level name; defaults to EVENTGLUE_LOG_LEVEL
        stream: Destination (default stderr, so stdout stays free for
            transformed source)
    """
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    root_logger.debug(
        "Logging configured",
        extra={"context": {"log_level": level_name}},
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
