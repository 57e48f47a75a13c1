"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, Field


class Geo(BaseModel):
    """Geographic coordinates (WGS84)."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class TravelStyle(str, Enum):
    """Travel style driving activity caps and budget ratios."""

    relaxation = "relaxation"
    city_explorer = "city_explorer"
    adventure = "adventure"
    business = "business"
    road_trip = "road_trip"

    @classmethod
    def normalize(cls, value: object) -> object:
        """Map legacy/user-facing style names onto the engine values."""
        if isinstance(value, str):
            key = value.strip().lower()
            return _STYLE_ALIASES.get(key, key)
        return value


_STYLE_ALIASES = {
    "relax": "relaxation",
    "luxury_escape": "relaxation",
    "explore": "city_explorer",
    "city_exploration": "city_explorer",
    "backpacking": "adventure",
    "business_travel": "business",
}


class BudgetTier(str, Enum):
    """Budget tier. Accepts low/mid/high as aliases."""

    budget = "budget"
    mid_range = "mid-range"
    luxury = "luxury"

    @classmethod
    def normalize(cls, value: object) -> object:
        """Map low/mid/high onto budget/mid-range/luxury."""
        if isinstance(value, str):
            key = value.strip().lower()
            return _TIER_ALIASES.get(key, key)
        return value

    @property
    def overnight_eligible(self) -> bool:
        """Whether travelers in this tier take overnight sleeper services."""
        return self is not BudgetTier.luxury


_TIER_ALIASES = {
    "low": "budget",
    "mid": "mid-range",
    "mid_range": "mid-range",
    "high": "luxury",
}


class TransportMode(str, Enum):
    """Intercity transport mode."""

    flight = "flight"
    train = "train"
    bus = "bus"
    car = "car"
    bike = "bike"


class TravelPreference(str, Enum):
    """User transport preference; `any` lets the engine decide."""

    any = "any"
    flight = "flight"
    train = "train"
    bus = "bus"
    car = "car"
    bike = "bike"


class OwnVehicle(str, Enum):
    """Vehicle the traveler brings along."""

    none = "none"
    car = "car"
    bike = "bike"


class LocalMode(str, Enum):
    """Mode for intra-day hops between activities."""

    walk = "walk"
    auto = "auto"
    taxi = "taxi"
    private_car = "private_car"


class SegmentType(str, Enum):
    """Type of itinerary segment."""

    outbound_travel = "outbound_travel"
    return_travel = "return_travel"
    intercity_travel = "intercity_travel"
    local_transport = "local_transport"
    accommodation = "accommodation"
    activity = "activity"
    gem = "gem"


class DistanceTier(str, Enum):
    """Coarse distance bucket used when precise route data is unavailable."""

    local = "local"
    short = "short"
    medium = "medium"
    long = "long"


class RouteSource(str, Enum):
    """Where a route time came from."""

    service = "service"
    estimate = "estimate"


class Envelope(str, Enum):
    """Budget envelope keys."""

    intercity = "intercity"
    accommodation = "accommodation"
    local_transport = "local_transport"
    activity = "activity"
    buffer = "buffer"
    upgrade_pool = "upgrade_pool"
