"""Blocking entry points for callers without an event loop."""

from __future__ import annotations

import asyncio
import concurrent.futures
from collections.abc import Coroutine
from typing import Any, TypeVar

T = TypeVar("T")


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Block until ``coro`` finishes and return its result.

    ``glm_sync`` is meant for plain scripts, but it also gets called from code
    already running inside a loop (notebook cells, sync helpers in async
    handlers). ``asyncio.run`` cannot nest, so there the count is driven on a
    one-off helper thread with its own loop while the caller's thread waits.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    helper = concurrent.futures.ThreadPoolExecutor(
        max_workers=1, thread_name_prefix="glm-tokens-sync"
    )
    try:
        return helper.submit(asyncio.run, coro).result()
    finally:
        helper.shutdown(wait=False)
