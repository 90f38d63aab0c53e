"""eventglue: compile async event handlers into host runtime adapters.

Example:
    from eventglue import event, fetch, respond_with_errors
    from eventglue.runtime import Response

    @event(fetch, respond_with_errors)
    async def main(req, env, ctx):
        return Response.ok("hello")

Compiling this module renames ``main`` to ``main_fetch_glue`` and binds a
generated adapter to the module-level name ``fetch``.
"""

__version__ = "0.1.0"

from eventglue.models.handler import HandlerConfig, HandlerKind
from eventglue.transform.attributes import (
    event,
    fetch,
    respond_with_errors,
    scheduled,
)
from eventglue.transform.pipeline import compile_source, transform_source

__all__ = [
    "HandlerConfig",
    "HandlerKind",
    "compile_source",
    "event",
    "fetch",
    "respond_with_errors",
    "scheduled",
    "transform_source",
]
