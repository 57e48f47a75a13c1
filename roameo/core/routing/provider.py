"""Route Time Provider: memoized city-pair travel times with a guaranteed fallback.

Lookups go through the resilient call executor. Any service failure
(timeout, breaker open, no route, HTTP error) resolves to the tier
estimate from `routing.distance`, so `get_route_time` never raises.
"""

import asyncio
import logging
from collections.abc import Sequence
from functools import lru_cache
from typing import Protocol

from roameo.core.adapters.geocode import CityGeocoder
from roameo.core.adapters.osrm import OsrmRouteService
from roameo.core.config import Settings, get_settings
from roameo.core.models.route import RouteTime
from roameo.core.routing.distance import fallback_route_time
from roameo.core.services.executor import (
    CallConfig,
    CallContext,
    CallExecutor,
    CallMetrics,
    ServiceCallError,
)
from roameo.core.utils.logging import StructuredCallLogger
from roameo.core.utils.metrics import PrometheusCallMetrics

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]


class RouteService(Protocol):
    """External routing backend."""

    name: str

    async def route_time(self, from_city: str, to_city: str) -> RouteTime: ...


class RouteTimeCache:
    """In-memory route cache with no expiry.

    Routes are geographically static, so entries live until `clear()`.
    Concurrent writers for the same key store equal values; last write wins.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, RouteTime] = {}

    @staticmethod
    def make_key(from_city: str, to_city: str) -> CacheKey:
        """Case/whitespace-normalized directed key."""
        return (" ".join(from_city.split()).lower(), " ".join(to_city.split()).lower())

    def get(self, key: CacheKey) -> RouteTime | None:
        return self._entries.get(key)

    def set(self, key: CacheKey, value: RouteTime) -> None:
        self._entries[key] = value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


def call_config_from_settings(settings: Settings) -> CallConfig:
    """Build executor configuration from settings."""
    return CallConfig(
        hard_timeout_ms=settings.route_hard_timeout_ms,
        retry_count=settings.route_retry_count,
        retry_jitter_min_ms=settings.retry_jitter_min_ms,
        retry_jitter_max_ms=settings.retry_jitter_max_ms,
        breaker_failure_threshold=settings.circuit_breaker_failures,
        breaker_window_seconds=settings.circuit_breaker_window_sec,
        breaker_half_open_seconds=settings.circuit_breaker_half_open_sec,
    )


class RouteTimeProvider:
    """Looks up travel time between two cities.

    Args:
        service: Routing backend; None means estimates only
        cache: Injectable cache (a fresh one by default)
        executor: Call executor; built from settings when omitted
        settings: Settings override (default: get_settings())
        metrics: Metrics recorder (default: the executor's)
    """

    def __init__(
        self,
        service: RouteService | None = None,
        cache: RouteTimeCache | None = None,
        executor: CallExecutor | None = None,
        settings: Settings | None = None,
        metrics: CallMetrics | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.service = service
        self.cache = cache if cache is not None else RouteTimeCache()
        self.executor = executor or CallExecutor(
            call_config_from_settings(self.settings), metrics=metrics
        )
        self.metrics = metrics or self.executor.metrics

    @property
    def service_name(self) -> str:
        return self.service.name if self.service else "none"

    async def get_route_time(self, from_city: str, to_city: str) -> RouteTime:
        """Travel time for a directed city pair. Never raises."""
        key = self.cache.make_key(from_city, to_city)
        cached = self.cache.get(key)
        if cached is not None:
            self.metrics.inc_cache_hit(self.service_name)
            return cached

        if self.service is None:
            self.metrics.inc_fallback(self.service_name, "disabled")
            return fallback_route_time(from_city, to_city)

        service = self.service
        ctx = CallContext(service=service.name, key=f"{key[0]}->{key[1]}")
        try:
            route = await self.executor.execute(
                ctx, lambda: service.route_time(from_city, to_city)
            )
        except ServiceCallError as e:
            estimate = fallback_route_time(from_city, to_city)
            logger.warning(
                f"[route_provider] {from_city} -> {to_city} failed ({type(e).__name__}), "
                f"using estimate {estimate.hours}h"
            )
            self.metrics.inc_fallback(service.name, type(e).__name__)
            return estimate

        self.cache.set(key, route)
        return route

    async def get_route_times(self, pairs: Sequence[tuple[str, str]]) -> list[RouteTime]:
        """Concurrent lookups, results in input order."""
        return list(await asyncio.gather(*(self.get_route_time(a, b) for a, b in pairs)))

    def clear_cache(self) -> None:
        self.cache.clear()


@lru_cache
def get_default_provider() -> RouteTimeProvider:
    """Process-wide provider backed by OSRM when the routing service is enabled."""
    settings = get_settings()
    metrics = PrometheusCallMetrics()
    executor = CallExecutor(
        call_config_from_settings(settings),
        metrics=metrics,
        logger=StructuredCallLogger(),
    )

    service: RouteService | None = None
    if settings.route_service_enabled:
        geocoder = CityGeocoder(
            base_url=settings.photon_base_url,
            user_agent=settings.http_user_agent,
        )
        service = OsrmRouteService(geocoder, base_url=settings.osrm_base_url)

    return RouteTimeProvider(service=service, executor=executor, settings=settings)
