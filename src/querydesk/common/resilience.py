"""
Resilience Module: Circuit Breakers for backend calls.

Each backend gets its own breaker so a dead warehouse does not fail cluster
requests. Only infrastructure failures (connection and transport errors,
timeouts) count towards opening a breaker. Everything else, including
unexpected errors raised while handling a result, is excluded.
"""
import pybreaker
from typing import Callable, List, Optional, Tuple, Type, Union

from querydesk.common.errors import (
    BackendConnectionError,
    BackendTransportError,
    ExecutionTimeoutError,
)
from querydesk.common.logger import get_logger
from querydesk.common.settings import settings

logger = get_logger("resilience")

Exclusion = Union[Type[BaseException], Callable[[BaseException], bool]]


class ObservabilityListener(pybreaker.CircuitBreakerListener):
    """Listener to export circuit breaker state changes and failures to logs."""

    def state_change(self, cb, old_state, new_state):
        old_name = old_state.name if old_state else "none"
        logger.warning(
            f"Circuit Breaker '{cb.name}' changed state: {old_name} -> {new_state.name}"
        )

    def failure(self, cb, exc):
        logger.error(
            f"Circuit Breaker '{cb.name}' recorded failure: {type(exc).__name__}: {exc}"
        )


HARD_FAILURES: Tuple[Type[Exception], ...] = (
    BackendConnectionError,
    BackendTransportError,
    ExecutionTimeoutError,
)


def is_soft_failure(exc: BaseException) -> bool:
    """True for failures that say nothing about backend availability."""
    return not isinstance(exc, HARD_FAILURES)


def create_breaker(
    name: str,
    fail_max: int = 5,
    reset_timeout: int = 30,
    exclude: Optional[List[Exclusion]] = None
) -> pybreaker.CircuitBreaker:
    """Factory to create a configured Circuit Breaker."""
    return pybreaker.CircuitBreaker(
        fail_max=fail_max,
        reset_timeout=reset_timeout,
        name=name,
        listeners=[ObservabilityListener()],
        exclude=exclude if exclude is not None else [is_soft_failure]
    )

# --- Global Breakers ---

WAREHOUSE_BREAKER = create_breaker(
    name="WAREHOUSE_BREAKER",
    fail_max=settings.breaker_fail_max,
    reset_timeout=settings.breaker_reset_timeout_sec,
)

CLUSTER_BREAKER = create_breaker(
    name="CLUSTER_BREAKER",
    fail_max=settings.breaker_fail_max,
    reset_timeout=settings.breaker_reset_timeout_sec,
)
