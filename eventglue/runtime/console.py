"""Console logging for handlers and generated adapters."""

from typing import Any

from eventglue.logging.config import get_logger

logger = get_logger(__name__)


def _join(values: tuple[Any, ...]) -> str:
    return " ".join(str(value) for value in values)


def console_log(*values: Any) -> None:
    """Log values joined by spaces, like a worker's console.log."""
    logger.info(
        _join(values),
        extra={"context": {"source": "console"}},
    )


def console_error(*values: Any) -> None:
    """
    Log values at ERROR level, like a worker's console.error.

    The first exception among the values supplies the traceback.
    """
    error = next((v for v in values if isinstance(v, BaseException)), None)
    logger.error(
        _join(values),
        exc_info=error,
        extra={
            "context": {
                "source": "console",
                "exception_type": type(error).__name__ if error else None,
            }
        },
    )
