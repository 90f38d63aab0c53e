"""Scheduled events and execution contexts."""

from collections.abc import Awaitable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from eventglue.runtime.raw import RawContext


class ScheduledEvent(BaseModel):
    """
    Timer-driven invocation.

    Attributes:
        cron: Cron expression that fired
        scheduled_time: Scheduled time in milliseconds since the epoch
        type: Event type, always "scheduled" from current hosts
    """

    model_config = ConfigDict(frozen=True)

    cron: str = Field(default="", description="Cron expression")
    scheduled_time: float = Field(..., description="Epoch milliseconds")
    type: str = "scheduled"

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "ScheduledEvent":
        """Convert a host scheduled-event dict."""
        return cls(
            cron=raw.get("cron") or "",
            scheduled_time=raw["scheduledTime"],
            type=raw.get("type") or "scheduled",
        )

    @property
    def scheduled_at(self) -> datetime:
        return datetime.fromtimestamp(self.scheduled_time / 1000, tz=UTC)


class Context:
    """Execution context passed to fetch handlers."""

    def __init__(self, raw: RawContext) -> None:
        self._raw = raw

    @classmethod
    def new(cls, raw: RawContext) -> "Context":
        return cls(raw)

    def wait_until(self, awaitable: Awaitable[Any]) -> None:
        """Keep the invocation alive until awaitable completes."""
        self._raw.wait_until(awaitable)


class ScheduleContext:
    """Execution context passed to scheduled handlers."""

    def __init__(self, raw: RawContext) -> None:
        self._raw = raw

    @classmethod
    def from_raw(cls, raw: RawContext) -> "ScheduleContext":
        return cls(raw)

    def wait_until(self, awaitable: Awaitable[Any]) -> None:
        self._raw.wait_until(awaitable)
