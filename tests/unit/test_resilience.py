import time

import pybreaker
import pytest

from querydesk.common.errors import (
    BackendConnectionError,
    BackendExecutionError,
    BackendTransportError,
    ExecutionTimeoutError,
    ToolSpawnError,
    UnsupportedQueryError,
)
from querydesk.common.resilience import create_breaker, is_soft_failure
from querydesk.common.sandbox import SandboxManager, run_with_timeout


def _raise(exc):
    raise exc


class TestBreakers:

    def test_hard_failures_open_the_breaker(self):
        breaker = create_breaker("TEST_HARD", fail_max=2, reset_timeout=60)
        for _ in range(2):
            with pytest.raises((BackendConnectionError, pybreaker.CircuitBreakerError)):
                breaker.call(_raise, BackendConnectionError("refused"))

        assert breaker.current_state == "open"
        with pytest.raises(pybreaker.CircuitBreakerError):
            breaker.call(lambda: "never")

    @pytest.mark.parametrize("exc", [
        BackendTransportError("Max retries exceeded"),
        ExecutionTimeoutError("slow"),
    ])
    def test_transport_errors_and_timeouts_count(self, exc):
        breaker = create_breaker("TEST_TIMEOUT", fail_max=1, reset_timeout=60)
        with pytest.raises((type(exc), pybreaker.CircuitBreakerError)):
            breaker.call(_raise, exc)
        assert breaker.current_state == "open"

    @pytest.mark.parametrize("exc", [
        BackendExecutionError("bad sql"),
        UnsupportedQueryError("nope"),
        ToolSpawnError("no kubectl"),
        UnicodeDecodeError("utf-8", b"\xe9", 0, 1, "invalid continuation byte"),
        ValueError("could not normalize"),
    ])
    def test_other_failures_are_ignored(self, exc):
        breaker = create_breaker("TEST_SOFT", fail_max=2, reset_timeout=60)
        for _ in range(3):
            with pytest.raises(type(exc)):
                breaker.call(_raise, exc)

        assert breaker.current_state == "closed"

    def test_is_soft_failure(self):
        assert is_soft_failure(RuntimeError("boom"))
        assert not is_soft_failure(BackendConnectionError("refused"))


class TestSandbox:

    def test_returns_result(self):
        assert run_with_timeout(lambda a, b: a + b, 2, 3, timeout_sec=1) == 5

    def test_propagates_errors(self):
        with pytest.raises(BackendExecutionError):
            run_with_timeout(_raise, BackendExecutionError("boom"), timeout_sec=1)

    def test_timeout(self):
        with pytest.raises(ExecutionTimeoutError) as exc:
            run_with_timeout(time.sleep, 0.5, timeout_sec=0.05, label="sleep")
        assert exc.value.message == "Operation timed out after 0.05 seconds."

    def test_shutdown_recreates_pool(self):
        pool = SandboxManager.get_pool()
        SandboxManager.shutdown()
        assert SandboxManager.get_pool() is not pool
