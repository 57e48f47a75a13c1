"""Tests for environment-driven settings."""

import pytest

from roameo.core.config import Settings, get_settings


def test_defaults() -> None:
    settings = Settings()

    assert settings.route_hard_timeout_ms == 4000
    assert settings.route_retry_count == 1
    assert (settings.overnight_min_hours, settings.overnight_max_hours) == (6.0, 16.0)
    assert settings.daily_window_min == 600
    assert settings.intercity_single_day_cap == 2
    assert settings.buffer_low_ratio == 0.05


def test_session_keeps_routing_service_off() -> None:
    assert Settings().route_service_enabled is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROUTE_HARD_TIMEOUT_MS", "1500")
    monkeypatch.setenv("OVERNIGHT_MAX_HOURS", "14")
    monkeypatch.setenv("OSRM_BASE_URL", "http://localhost:5000")

    settings = Settings()

    assert settings.route_hard_timeout_ms == 1500
    assert settings.overnight_max_hours == 14.0
    assert settings.osrm_base_url == "http://localhost:5000"


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
