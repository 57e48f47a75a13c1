"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Routing service
    route_service_enabled: bool = True
    osrm_base_url: str = "https://router.project-osrm.org"
    photon_base_url: str = "https://photon.komoot.io/api/"
    http_user_agent: str = "RoameoTravelApp/1.0"

    # Timeouts (milliseconds)
    route_hard_timeout_ms: int = 4000

    # Retry jitter (milliseconds)
    route_retry_count: int = 1
    retry_jitter_min_ms: int = 200
    retry_jitter_max_ms: int = 500

    # Circuit breaker
    circuit_breaker_failures: int = 5
    circuit_breaker_window_sec: int = 60
    circuit_breaker_half_open_sec: int = 30

    # Travel-day rules (hours)
    short_segment_max_hours: float = 3.0
    overnight_min_hours: float = 6.0
    overnight_max_hours: float = 16.0

    # Daily time budget (minutes)
    daily_window_min: int = 600
    activity_duration_min: int = 60
    activity_buffer_min: int = 30
    arrival_buffer_min: int = 30
    departure_buffer_min: int = 90

    # Single-day intercity trips
    intercity_single_day_cap: int = 2

    # Local transport insertion (km)
    local_transport_min_km: float = 0.0
    local_transport_walk_km: float = 0.5
    max_intraday_distance_km: float = 40.0

    # Budget risk thresholds
    buffer_low_ratio: float = 0.05
    near_budget_tolerance: float = 0.2


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
