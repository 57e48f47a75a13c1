"""Async executor for external service calls.

Wraps a single service call with:
- Hard timeout per attempt
- Bounded retries with jitter
- Per-service circuit breaker
- Metrics and structured logging

Cancellation is plain asyncio cancellation: `CancelledError` is never
retried and never counted against the breaker.
"""

import asyncio
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import TypeVar

T = TypeVar("T")


class ServiceCallError(Exception):
    """Base class for failed external service calls."""

    pass


class ServiceTimeoutError(ServiceCallError):
    """Service call exceeded timeout on every attempt."""

    pass


class ServiceCircuitOpenError(ServiceCallError):
    """Circuit breaker is open for this service."""

    pass


class ServiceExecutionError(ServiceCallError):
    """Service call failed on every attempt."""

    pass


@dataclass(frozen=True)
class CallContext:
    """Context for one logical service call."""

    service: str
    key: str


@dataclass
class CallConfig:
    """Configuration for service calls."""

    hard_timeout_ms: int
    retry_count: int
    retry_jitter_min_ms: int
    retry_jitter_max_ms: int
    breaker_failure_threshold: int = 5
    breaker_window_seconds: int = 60
    breaker_half_open_seconds: int = 30


class BreakerState(str, Enum):
    """Circuit breaker state."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreaker:
    """Per-service circuit breaker.

    Tracks failures within a time window and opens after threshold.
    """

    service: str
    failure_threshold: int
    window_seconds: int
    half_open_seconds: int
    state: BreakerState = BreakerState.CLOSED
    failure_times: list[datetime] = field(default_factory=list)
    opened_at: datetime | None = None

    @classmethod
    def from_config(cls, service: str, config: CallConfig) -> "CircuitBreaker":
        return cls(
            service=service,
            failure_threshold=config.breaker_failure_threshold,
            window_seconds=config.breaker_window_seconds,
            half_open_seconds=config.breaker_half_open_seconds,
        )

    def record_success(self) -> None:
        """Record successful execution."""
        if self.state == BreakerState.HALF_OPEN:
            # Success in half-open -> reset to closed
            self.state = BreakerState.CLOSED
            self.failure_times.clear()
            self.opened_at = None

    def record_failure(self, now: datetime) -> None:
        """Record failed execution."""
        cutoff = now - timedelta(seconds=self.window_seconds)
        self.failure_times = [t for t in self.failure_times if t > cutoff]
        self.failure_times.append(now)

        if self.state == BreakerState.HALF_OPEN or len(self.failure_times) >= self.failure_threshold:
            self.state = BreakerState.OPEN
            self.opened_at = now

    def check_and_update_state(self, now: datetime) -> BreakerState:
        """Check if breaker should transition states."""
        if self.state == BreakerState.OPEN:
            if self.opened_at and (now - self.opened_at).total_seconds() >= self.half_open_seconds:
                self.state = BreakerState.HALF_OPEN

        return self.state

    def is_open(self, now: datetime) -> bool:
        """Check if breaker is currently open (rejecting calls)."""
        return self.check_and_update_state(now) == BreakerState.OPEN


# Metrics interface (implemented by utils.metrics)
class CallMetrics:
    """Interface for service call metrics."""

    def record_latency(self, service: str, outcome: str, latency_ms: float) -> None:
        pass

    def inc_error(self, service: str, reason: str) -> None:
        pass

    def inc_cache_hit(self, service: str) -> None:
        pass

    def inc_fallback(self, service: str, reason: str) -> None:
        pass


# Logging interface (implemented by utils.logging)
class CallLogger:
    """Interface for structured call logging."""

    def log_attempt(
        self,
        ctx: CallContext,
        attempt: int,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        pass


class CallExecutor:
    """Runs service calls with timeout, retry and breaker handling."""

    def __init__(
        self,
        config: CallConfig,
        metrics: CallMetrics | None = None,
        logger: CallLogger | None = None,
        sleep_fn: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            config: Timeout/retry/breaker configuration
            metrics: Metrics recorder (optional, defaults to no-op)
            logger: Structured logger (optional, defaults to no-op)
            sleep_fn: Injectable sleep function (default: asyncio.sleep)
        """
        self.config = config
        self.metrics = metrics or CallMetrics()
        self._logger = logger or CallLogger()
        self._sleep = sleep_fn or asyncio.sleep
        self._breakers: dict[str, CircuitBreaker] = {}

    def breaker_for(self, service: str) -> CircuitBreaker:
        """Get or create the breaker shared by all calls to `service`."""
        if service not in self._breakers:
            self._breakers[service] = CircuitBreaker.from_config(service, self.config)
        return self._breakers[service]

    async def execute(self, ctx: CallContext, fn: Callable[[], Awaitable[T]]) -> T:
        """Execute a service call.

        Raises:
            ServiceCircuitOpenError: Circuit breaker is open
            ServiceTimeoutError: Every attempt timed out
            ServiceExecutionError: Every attempt failed (last error chained)
        """
        breaker = self.breaker_for(ctx.service)
        start_time = time.monotonic()

        if breaker.is_open(datetime.now()):
            elapsed_ms = (time.monotonic() - start_time) * 1000
            self.metrics.record_latency(ctx.service, "breaker_open", elapsed_ms)
            self.metrics.inc_error(ctx.service, "breaker_open")
            self._logger.log_attempt(ctx, 0, "breaker_open", elapsed_ms, error_reason="breaker_open")
            raise ServiceCircuitOpenError(f"Circuit breaker open for {ctx.service}")

        last_error: Exception | None = None
        for attempt in range(self.config.retry_count + 1):
            attempt_start = time.monotonic()

            try:
                result = await asyncio.wait_for(fn(), timeout=self.config.hard_timeout_ms / 1000)
            except TimeoutError as e:
                last_error = e
                outcome, reason = "timeout", "timeout"
            except Exception as e:
                last_error = e
                outcome, reason = "error", type(e).__name__
            else:
                elapsed_ms = (time.monotonic() - attempt_start) * 1000
                breaker.record_success()
                self.metrics.record_latency(ctx.service, "success", elapsed_ms)
                self._logger.log_attempt(ctx, attempt + 1, "success", elapsed_ms)
                return result

            elapsed_ms = (time.monotonic() - attempt_start) * 1000
            self.metrics.inc_error(ctx.service, "timeout" if outcome == "timeout" else "execution_error")
            self._logger.log_attempt(ctx, attempt + 1, outcome, elapsed_ms, error_reason=reason)
            breaker.record_failure(datetime.now())

            if attempt < self.config.retry_count:
                if breaker.is_open(datetime.now()):
                    break
                jitter_ms = random.uniform(
                    self.config.retry_jitter_min_ms, self.config.retry_jitter_max_ms
                )
                await self._sleep(jitter_ms / 1000)

        if isinstance(last_error, TimeoutError):
            raise ServiceTimeoutError(f"{ctx.service} timed out for {ctx.key}")
        raise ServiceExecutionError(f"{ctx.service} failed for {ctx.key}") from last_error
