"""High-level types and conversions used by handlers and generated adapters."""

from eventglue.runtime.bindings import HostBinding, host_export
from eventglue.runtime.console import console_error, console_log
from eventglue.runtime.env import Env
from eventglue.runtime.errors import HandlerFault
from eventglue.runtime.events import Context, ScheduleContext, ScheduledEvent
from eventglue.runtime.http import Request, Response
from eventglue.runtime.raw import RawContext

__all__ = [
    "Context",
    "Env",
    "HandlerFault",
    "HostBinding",
    "RawContext",
    "Request",
    "Response",
    "ScheduleContext",
    "ScheduledEvent",
    "console_error",
    "console_log",
    "host_export",
]
