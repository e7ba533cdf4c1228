"""
Sandbox Manager for time-bounded backend calls.

Driver calls that have no native timeout (e.g. a warehouse statement) are
submitted to a shared thread pool and awaited with a deadline, so a hung
backend surfaces as ExecutionTimeoutError instead of blocking the request.
"""
from __future__ import annotations

import atexit
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Any, Callable, Optional, TypeVar

from querydesk.common.errors import ExecutionTimeoutError
from querydesk.common.logger import get_logger
from querydesk.common.settings import settings

logger = get_logger("sandbox_manager")

T = TypeVar("T")


class SandboxManager:
    """Manages the global thread pool for bounded execution."""

    _pool: Optional[ThreadPoolExecutor] = None

    @classmethod
    def get_pool(cls) -> ThreadPoolExecutor:
        if cls._pool is None:
            workers = settings.sandbox_workers
            logger.info(f"Initializing execution sandbox with {workers} workers.")
            cls._pool = ThreadPoolExecutor(
                max_workers=workers,
                thread_name_prefix="SandboxWorker",
            )
        return cls._pool

    @classmethod
    def shutdown(cls):
        """Shuts down the pool without waiting for hung calls."""
        if cls._pool:
            logger.info("Shutting down execution sandbox...")
            cls._pool.shutdown(wait=False, cancel_futures=True)
            cls._pool = None


atexit.register(SandboxManager.shutdown)


def run_with_timeout(func: Callable[..., T], *args: Any, timeout_sec: float, label: str = "") -> T:
    """Runs ``func(*args)`` in the sandbox pool, waiting at most ``timeout_sec``.

    Exceptions raised by ``func`` propagate unchanged.

    Raises:
        ExecutionTimeoutError: If the call does not finish in time.
    """
    future = SandboxManager.get_pool().submit(func, *args)
    try:
        return future.result(timeout=timeout_sec)
    except FutureTimeoutError:
        future.cancel()
        name = label or getattr(func, "__name__", "call")
        logger.error(f"Sandbox Timeout ({timeout_sec}s) for {name}")
        raise ExecutionTimeoutError(f"Operation timed out after {timeout_sec} seconds.")
