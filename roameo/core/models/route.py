"""Route models - external routing results and per-segment feasibility."""

from pydantic import BaseModel, ConfigDict, Field

from roameo.core.models.common import RouteSource


class RouteTime(BaseModel):
    """Travel time between two cities, from the routing service or an estimate."""

    model_config = ConfigDict(frozen=True)

    hours: float = Field(..., ge=0)
    distance_km: float = Field(..., ge=0)
    source: RouteSource


class RouteSegment(BaseModel):
    """One ordered city pair on the trip route with its travel-day cost."""

    from_city: str
    to_city: str
    hours: float = Field(..., ge=0)
    distance_km: float = Field(..., ge=0)
    source: RouteSource
    can_overnight: bool = False
    travel_days: int = Field(0, ge=0)
