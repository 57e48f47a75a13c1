"""Shared pytest fixtures for all test suites."""

import pytest

from roameo.core.config import Settings
from roameo.core.services.executor import CallConfig, CallExecutor


@pytest.fixture
def settings() -> Settings:
    """Fresh settings from defaults and the test environment."""
    return Settings()


@pytest.fixture
def sleep_calls() -> list[float]:
    return []


@pytest.fixture
def executor(sleep_calls: list[float]) -> CallExecutor:
    """Executor with one retry and a recording no-op sleep.

    Usage:
        async def test_something(executor):
            provider = RouteTimeProvider(service=..., executor=executor)
    """

    async def fake_sleep(seconds: float) -> None:
        sleep_calls.append(seconds)

    config = CallConfig(
        hard_timeout_ms=500,
        retry_count=1,
        retry_jitter_min_ms=200,
        retry_jitter_max_ms=500,
        breaker_failure_threshold=5,
        breaker_window_seconds=60,
        breaker_half_open_seconds=30,
    )
    return CallExecutor(config, sleep_fn=fake_sleep)
