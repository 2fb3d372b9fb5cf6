"""Async utilities for running blocking sync work from async MCP handlers."""

import asyncio
from typing import Any, Callable, TypeVar

T = TypeVar("T")


async def run_sync(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """Run a synchronous function in a thread pool without blocking the event loop.

    Directory copies can take arbitrarily long, so every engine call made
    from a tool handler goes through this wrapper.

    Args:
        func: Synchronous function to call
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result of func(*args, **kwargs)

    Example:
        # In MCP tool handler:
        batch = await run_sync(session.sync_all, dry_run=True)
    """
    return await asyncio.to_thread(func, *args, **kwargs)
