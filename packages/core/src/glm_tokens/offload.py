"""Run blocking work on a worker pool and await it from async code.

Encoding and template rendering are CPU-bound; running them on the event loop
would stall every other coroutine sharing it. ``WorkerPool.run`` hands the
closure to a ``ThreadPoolExecutor`` and suspends until it finishes.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from concurrent.futures import BrokenExecutor, ThreadPoolExecutor
from typing import Any, TypeVar

from .config import GlmTokensConfig
from .errors import GlmTokensError, ThreadPoolError, is_panic

__all__ = ["WorkerPool", "get_pool", "set_default_pool"]

logger = logging.getLogger("glm_tokens")

T = TypeVar("T")


def _cancelling() -> bool:
    task = asyncio.current_task()
    return bool(task is not None and task.cancelling())


class WorkerPool:
    """Bounded thread pool with an awaitable ``run``.

    The executor is created on first use. Queueing and thread count are
    ``ThreadPoolExecutor``'s own; ``max_workers=None`` keeps its default.
    """

    def __init__(
        self,
        max_workers: int | None = None,
        thread_name_prefix: str = "glm-tokens",
    ) -> None:
        if max_workers is not None and max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.max_workers = max_workers
        self.thread_name_prefix = thread_name_prefix
        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def from_config(cls, config: GlmTokensConfig) -> WorkerPool:
        return cls(max_workers=config.max_workers, thread_name_prefix=config.thread_name_prefix)

    @property
    def closed(self) -> bool:
        return self._closed

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._closed:
                raise RuntimeError("worker pool is shut down")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix=self.thread_name_prefix,
                )
                logger.debug(
                    "[glm-tokens] Started worker pool (max_workers=%s)",
                    self.max_workers or "default",
                )
            return self._executor

    async def run(self, fn: Callable[..., T], *args: Any) -> T:
        """Run ``fn(*args)`` once on a worker thread and return its result.

        ``GlmTokensError`` raised by ``fn`` propagates unchanged. Anything
        else that stops ``fn`` from producing a result (pool shut down,
        broken executor, an unexpected exception inside ``fn``) is raised as
        ``ThreadPoolError``. Cancelling the awaiting task does not interrupt
        ``fn`` once it has started.
        """
        try:
            future = self._get_executor().submit(fn, *args)
        except (RuntimeError, BrokenExecutor) as exc:
            logger.error("[glm-tokens] Could not submit task: %s", exc)
            raise ThreadPoolError(exc) from exc

        try:
            return await asyncio.wrap_future(future)
        except GlmTokensError:
            raise
        except asyncio.CancelledError:
            if future.cancelled() and not _cancelling():
                logger.error("[glm-tokens] Task cancelled by the worker pool")
                raise ThreadPoolError("task cancelled by the worker pool") from None
            raise
        except Exception as exc:
            logger.error("[glm-tokens] Task failed on worker thread: %r", exc)
            raise ThreadPoolError(exc) from exc
        except BaseException as exc:
            if not is_panic(exc):
                raise
            logger.error("[glm-tokens] Task panicked on worker thread: %r", exc)
            raise ThreadPoolError(exc) from exc

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        with self._lock:
            self._closed = True
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait, cancel_futures=cancel_futures)
            logger.debug("[glm-tokens] Worker pool shut down")

    def __repr__(self) -> str:
        return f"WorkerPool(max_workers={self.max_workers!r}, closed={self._closed})"


# ---------------------------------------------------------------------------
# Process default pool
# ---------------------------------------------------------------------------

_pool: WorkerPool | None = None
_pool_lock = threading.Lock()


def get_pool() -> WorkerPool:
    """Return the default pool, sized from ``GlmTokensConfig.from_env()``."""
    global _pool
    with _pool_lock:
        if _pool is None:
            _pool = WorkerPool.from_config(GlmTokensConfig.from_env())
        return _pool


def set_default_pool(pool: WorkerPool | None) -> WorkerPool | None:
    """Replace the default pool and return the previous one.

    The previous pool is not shut down; that is the caller's decision.
    Passing ``None`` makes the next ``get_pool()`` build a fresh one.
    """
    global _pool
    with _pool_lock:
        previous, _pool = _pool, pool
    return previous
