"""Low-level shapes exchanged with the host runtime.

Requests, responses and scheduled events cross the host boundary as plain
JSON-compatible dicts. Execution contexts are RawContext objects owned by
the host.
"""

import asyncio
from collections.abc import Awaitable
from typing import Any, TypedDict

from eventglue.logging.config import get_logger

logger = get_logger(__name__)


class RawRequest(TypedDict, total=False):
    """Request as delivered by the host."""

    method: str
    url: str
    headers: dict[str, str]
    body: str
    isBase64Encoded: bool


class RawResponse(TypedDict):
    """Response as returned to the host."""

    status: int
    headers: dict[str, str]
    body: str
    isBase64Encoded: bool


class RawScheduledEvent(TypedDict, total=False):
    """Timer event as delivered by the host."""

    cron: str
    scheduledTime: float
    type: str


class RawContext:
    """
    Host-side execution context for one invocation.

    Work registered with wait_until() is awaited by the host after the
    handler returns, whether or not it succeeded.
    """

    def __init__(self) -> None:
        self._pending: list[Awaitable[Any]] = []

    @property
    def pending(self) -> int:
        """Number of registered, not yet drained awaitables."""
        return len(self._pending)

    def wait_until(self, awaitable: Awaitable[Any]) -> None:
        self._pending.append(awaitable)

    async def drain(self) -> None:
        """Await all registered work, logging failures instead of raising."""
        while self._pending:
            pending, self._pending = self._pending, []
            results = await asyncio.gather(*pending, return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException):
                    logger.error(
                        "wait_until task failed",
                        exc_info=result,
                        extra={
                            "context": {"exception_type": type(result).__name__}
                        },
                    )
