"""Distance helpers: haversine, distance tiers, and the fallback route estimate.

The fallback is the guaranteed-termination path of route lookups, so nothing
here performs I/O or raises on odd input.
"""

import math
import re
from dataclasses import dataclass

from roameo.core.data.city_coordinates import get_city_coords
from roameo.core.models.common import DistanceTier, RouteSource
from roameo.core.models.route import RouteTime

EARTH_RADIUS_KM = 6371.0

# Straight-line to road distance
ROAD_FACTOR = 1.3

DEFAULT_SPEED_KMH = 60.0


@dataclass(frozen=True)
class TierEstimate:
    """Representative distance and driving speed for a distance tier."""

    distance_km: float
    speed_kmh: float

    @property
    def hours(self) -> float:
        return estimate_driving_hours(self.distance_km, self.speed_kmh)


DISTANCE_TIERS: dict[DistanceTier, TierEstimate] = {
    DistanceTier.local: TierEstimate(distance_km=30, speed_kmh=60),  # 0.5h
    DistanceTier.short: TierEstimate(distance_km=300, speed_kmh=60),  # 5h
    DistanceTier.medium: TierEstimate(distance_km=640, speed_kmh=80),  # 8h
    DistanceTier.long: TierEstimate(distance_km=960, speed_kmh=80),  # 12h
}

# Upper bounds (road km) when both cities have known coordinates
_TIER_BOUNDS_KM = (
    (50.0, DistanceTier.local),
    (400.0, DistanceTier.short),
    (800.0, DistanceTier.medium),
)

_COUNTRY_KEYWORDS = (
    "india", "usa", "uk", "japan", "france", "germany", "italy", "spain",
    "thailand", "australia", "brazil", "mexico", "canada", "china",
)

_SAME_REGION_PAIRS = (
    ("delhi", "mumbai"), ("delhi", "jaipur"), ("mumbai", "goa"), ("mumbai", "pune"),
    ("bangalore", "chennai"), ("bangalore", "mysore"), ("hyderabad", "bangalore"),
    ("paris", "lyon"), ("paris", "nice"), ("london", "manchester"), ("london", "edinburgh"),
    ("new york", "boston"), ("new york", "philadelphia"), ("los angeles", "san francisco"),
    ("tokyo", "osaka"), ("tokyo", "kyoto"), ("bangkok", "chiang mai"), ("bangkok", "phuket"),
    ("sydney", "melbourne"), ("rome", "florence"), ("rome", "venice"),
    ("berlin", "munich"), ("barcelona", "madrid"),
)


def _words(name: str) -> set[str]:
    return {w for w in re.split(r"[,\s]+", name) if w}


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in km."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


def estimate_driving_hours(distance_km: float, speed_kmh: float = DEFAULT_SPEED_KMH) -> float:
    """Driving time in hours at an average speed."""
    if distance_km <= 0:
        return 0.0
    return distance_km / speed_kmh


def estimate_distance_tier(from_city: str | None, to_city: str | None) -> DistanceTier:
    """Classify a city pair into a coarse distance tier.

    Order of evidence: identical names, known coordinates (haversine times a
    road factor), shared country keyword or a known same-region pair.
    Anything else is assumed medium.
    """
    if not from_city or not to_city:
        return DistanceTier.medium

    a = from_city.strip().lower()
    b = to_city.strip().lower()
    if a == b:
        return DistanceTier.local

    geo_a = get_city_coords(a)
    geo_b = get_city_coords(b)
    if geo_a and geo_b:
        road_km = haversine_km(geo_a.lat, geo_a.lon, geo_b.lat, geo_b.lon) * ROAD_FACTOR
        for bound, tier in _TIER_BOUNDS_KM:
            if road_km < bound:
                return tier
        return DistanceTier.long

    country_a = next((c for c in _COUNTRY_KEYWORDS if c in _words(a)), None)
    country_b = next((c for c in _COUNTRY_KEYWORDS if c in _words(b)), None)
    if country_a and country_a == country_b:
        return DistanceTier.short

    for x, y in _SAME_REGION_PAIRS:
        if (x in a and y in b) or (y in a and x in b):
            return DistanceTier.short

    return DistanceTier.medium


def fallback_route_time(from_city: str, to_city: str) -> RouteTime:
    """Deterministic tier-based estimate used when the routing service fails."""
    tier = estimate_distance_tier(from_city, to_city)
    estimate = DISTANCE_TIERS[tier]
    return RouteTime(
        hours=round(estimate.hours, 1),
        distance_km=estimate.distance_km,
        source=RouteSource.estimate,
    )
