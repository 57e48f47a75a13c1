"""Unit tests for the service call executor.

Tests cover:
1. Circuit breaker state transitions
2. Timeout behavior
3. Retry + jitter
4. Breaker opening across calls, cancellations not counted
5. Metrics and structured logging wiring
"""

import asyncio
import logging
from datetime import datetime, timedelta

import pytest
from prometheus_client import generate_latest

from roameo.core.services.executor import (
    BreakerState,
    CallConfig,
    CallContext,
    CallExecutor,
    CircuitBreaker,
    ServiceCircuitOpenError,
    ServiceExecutionError,
    ServiceTimeoutError,
)
from roameo.core.utils.logging import StructuredCallLogger
from roameo.core.utils.metrics import PrometheusCallMetrics


def make_config(**overrides: int) -> CallConfig:
    fields = {
        "hard_timeout_ms": 4000,
        "retry_count": 0,
        "retry_jitter_min_ms": 200,
        "retry_jitter_max_ms": 500,
        "breaker_failure_threshold": 3,
        "breaker_window_seconds": 60,
        "breaker_half_open_seconds": 30,
    }
    fields.update(overrides)
    return CallConfig(**fields)


async def no_sleep(seconds: float) -> None:
    pass


class TestCircuitBreaker:
    """Test CircuitBreaker state transitions."""

    def make_breaker(self, threshold: int = 3) -> CircuitBreaker:
        return CircuitBreaker(
            service="osrm",
            failure_threshold=threshold,
            window_seconds=60,
            half_open_seconds=30,
        )

    def test_breaker_starts_closed(self) -> None:
        assert self.make_breaker().state == BreakerState.CLOSED

    def test_breaker_opens_after_threshold_failures(self) -> None:
        now = datetime.now()
        breaker = self.make_breaker()
        for _ in range(3):
            breaker.record_failure(now)
        assert breaker.check_and_update_state(now) == BreakerState.OPEN

    def test_breaker_forgets_failures_outside_window(self) -> None:
        now = datetime.now()
        breaker = self.make_breaker()
        old = now - timedelta(seconds=65)
        breaker.record_failure(old)
        breaker.record_failure(old)
        breaker.record_failure(now)

        assert breaker.check_and_update_state(now) == BreakerState.CLOSED
        assert len(breaker.failure_times) == 1

    def test_breaker_half_open_then_closes_on_success(self) -> None:
        now = datetime.now()
        breaker = self.make_breaker(threshold=2)
        breaker.record_failure(now)
        breaker.record_failure(now)
        assert breaker.is_open(now)

        later = now + timedelta(seconds=31)
        assert breaker.check_and_update_state(later) == BreakerState.HALF_OPEN

        breaker.record_success()
        assert breaker.state == BreakerState.CLOSED
        assert breaker.failure_times == []

    def test_failure_in_half_open_reopens(self) -> None:
        now = datetime.now()
        breaker = self.make_breaker(threshold=2)
        breaker.record_failure(now)
        breaker.record_failure(now)
        later = now + timedelta(seconds=31)
        breaker.check_and_update_state(later)

        breaker.record_failure(later)
        assert breaker.state == BreakerState.OPEN
        assert breaker.opened_at == later


class TestCallExecutor:
    """Test CallExecutor execution logic."""

    @pytest.mark.asyncio
    async def test_successful_execution(self) -> None:
        executor = CallExecutor(make_config())

        async def call() -> dict[str, str]:
            return {"result": "ok"}

        result = await executor.execute(CallContext(service="dummy", key="a->b"), call)
        assert result == {"result": "ok"}

    @pytest.mark.asyncio
    async def test_timeout_raises_error(self) -> None:
        executor = CallExecutor(make_config(hard_timeout_ms=50, retry_count=1), sleep_fn=no_sleep)

        async def slow() -> str:
            await asyncio.sleep(10)
            return "too slow"

        with pytest.raises(ServiceTimeoutError):
            await executor.execute(CallContext(service="slow", key="a->b"), slow)

    @pytest.mark.asyncio
    async def test_retry_with_jitter(self) -> None:
        sleep_calls: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            sleep_calls.append(seconds)

        executor = CallExecutor(make_config(retry_count=1), sleep_fn=fake_sleep)
        call_count = 0

        async def flaky() -> str:
            nonlocal call_count
            call_count += 1
            if call_count == 1:
                raise ConnectionError("first attempt fails")
            return "success"

        result = await executor.execute(CallContext(service="flaky", key="a->b"), flaky)
        assert result == "success"
        assert call_count == 2
        assert len(sleep_calls) == 1
        assert 0.2 <= sleep_calls[0] <= 0.5

    @pytest.mark.asyncio
    async def test_exhausted_retries_chain_last_error(self) -> None:
        executor = CallExecutor(make_config(retry_count=2), sleep_fn=no_sleep)

        async def always_fails() -> str:
            raise ValueError("bad payload")

        with pytest.raises(ServiceExecutionError) as exc_info:
            await executor.execute(CallContext(service="broken", key="a->b"), always_fails)
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.asyncio
    async def test_circuit_breaker_opens_after_failures(self) -> None:
        executor = CallExecutor(make_config(breaker_failure_threshold=3))
        call_count = 0

        async def always_fails() -> str:
            nonlocal call_count
            call_count += 1
            raise RuntimeError("always fails")

        ctx = CallContext(service="breaker_test", key="a->b")
        for _ in range(3):
            with pytest.raises(ServiceExecutionError):
                await executor.execute(ctx, always_fails)

        with pytest.raises(ServiceCircuitOpenError):
            await executor.execute(ctx, always_fails)
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_breakers_are_per_service(self) -> None:
        executor = CallExecutor(make_config(breaker_failure_threshold=1))

        async def always_fails() -> str:
            raise RuntimeError("down")

        async def works() -> str:
            return "ok"

        with pytest.raises(ServiceExecutionError):
            await executor.execute(CallContext(service="down", key="x"), always_fails)

        assert await executor.execute(CallContext(service="up", key="x"), works) == "ok"
        assert executor.breaker_for("down").state == BreakerState.OPEN
        assert executor.breaker_for("up").state == BreakerState.CLOSED

    @pytest.mark.asyncio
    async def test_cancellation_is_not_counted_as_failure(self) -> None:
        executor = CallExecutor(make_config(breaker_failure_threshold=1))

        async def slow() -> str:
            await asyncio.sleep(10)
            return "never"

        task = asyncio.create_task(executor.execute(CallContext(service="cancel", key="x"), slow))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert executor.breaker_for("cancel").failure_times == []
        assert executor.breaker_for("cancel").state == BreakerState.CLOSED

    @pytest.mark.asyncio
    async def test_metrics_recorded(self) -> None:
        executor = CallExecutor(make_config(hard_timeout_ms=50), metrics=PrometheusCallMetrics())

        async def ok() -> str:
            return "ok"

        async def slow() -> str:
            await asyncio.sleep(10)
            return "never"

        await executor.execute(CallContext(service="metric_success", key="x"), ok)
        with pytest.raises(ServiceTimeoutError):
            await executor.execute(CallContext(service="metric_timeout", key="x"), slow)

        output = generate_latest().decode("utf-8")
        assert "route_lookup_latency_ms" in output
        assert 'service="metric_success"' in output
        assert 'outcome="success"' in output
        assert "route_lookup_errors_total" in output
        assert 'service="metric_timeout"' in output
        assert 'reason="timeout"' in output

    @pytest.mark.asyncio
    async def test_structured_log_per_attempt(self, caplog: pytest.LogCaptureFixture) -> None:
        executor = CallExecutor(
            make_config(retry_count=1), logger=StructuredCallLogger(), sleep_fn=no_sleep
        )
        call_count = 0

        async def flaky() -> str:
            nonlocal call_count
            call_count += 1
            if call_count == 1:
                raise ConnectionError("reset")
            return "ok"

        with caplog.at_level(logging.INFO, logger="roameo.core.utils.logging"):
            await executor.execute(CallContext(service="osrm", key="goa->pune"), flaky)

        records = [r for r in caplog.records if hasattr(r, "structured")]
        assert [r.structured["outcome"] for r in records] == ["error", "success"]
        assert records[0].structured["error_reason"] == "ConnectionError"
        assert records[1].structured["attempt"] == 2
        assert records[1].structured["key"] == "goa->pune"
