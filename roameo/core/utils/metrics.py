"""Prometheus metrics for route lookups."""

from prometheus_client import Counter, Histogram

route_lookup_latency_ms = Histogram(
    "route_lookup_latency_ms",
    "Route service call latency in milliseconds",
    ["service", "outcome"],
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 4000, 8000],
)

route_lookup_errors_total = Counter(
    "route_lookup_errors_total",
    "Total route service call errors",
    ["service", "reason"],
)

route_cache_hits_total = Counter(
    "route_cache_hits_total",
    "Total route time cache hits",
    ["service"],
)

route_fallbacks_total = Counter(
    "route_fallbacks_total",
    "Total route lookups answered by the tier estimate",
    ["service", "reason"],
)


class PrometheusCallMetrics:
    """Prometheus-based service call metrics implementation."""

    def record_latency(self, service: str, outcome: str, latency_ms: float) -> None:
        """Record call latency."""
        route_lookup_latency_ms.labels(service=service, outcome=outcome).observe(latency_ms)

    def inc_error(self, service: str, reason: str) -> None:
        """Increment error counter."""
        route_lookup_errors_total.labels(service=service, reason=reason).inc()

    def inc_cache_hit(self, service: str) -> None:
        """Increment cache hit counter."""
        route_cache_hits_total.labels(service=service).inc()

    def inc_fallback(self, service: str, reason: str) -> None:
        """Increment fallback counter."""
        route_fallbacks_total.labels(service=service, reason=reason).inc()
