"""Host-callable bindings for generated adapters.

``host_export`` is applied by the default binding export generator. The
resulting HostBinding can be awaited by async hosts (``invoke``) or called
synchronously by hosts such as AWS Lambda, which run one event per call.
"""

import asyncio
import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from eventglue.models.handler import EXPORT_NAMES
from eventglue.runtime.raw import RawContext


class HostBinding:
    """A generated adapter as seen by the host runtime."""

    def __init__(self, handler: Callable[..., Awaitable[Any]]) -> None:
        """
        Initialize HostBinding.

        Args:
            handler: Generated ``async def fetch`` or ``async def scheduled``

        Raises:
            TypeError: If handler is not a coroutine function
            ValueError: If handler is not named after a host export
        """
        if not inspect.iscoroutinefunction(handler):
            raise TypeError("host exports must be async functions")
        if handler.__name__ not in EXPORT_NAMES:
            raise ValueError(f"'{handler.__name__}' is not a host export name")
        self.handler = handler
        self.name = handler.__name__
        functools.update_wrapper(self, handler)

    async def invoke(self, event: Any, env: Any, ctx: RawContext) -> Any:
        """Run the adapter, then drain the context's wait_until work."""
        try:
            return await self.handler(event, env, ctx)
        finally:
            if isinstance(ctx, RawContext):
                await ctx.drain()

    def __call__(self, event: Any, env: Any, ctx: RawContext) -> Any:
        return asyncio.run(self.invoke(event, env, ctx))

    def __repr__(self) -> str:
        return f"<HostBinding {self.name}>"


def host_export(handler: Callable[..., Awaitable[Any]]) -> HostBinding:
    """Expose a generated adapter to the host under its own name."""
    return HostBinding(handler)
