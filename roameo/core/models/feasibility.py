"""Feasibility models - duration planner output and derived timeline."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from roameo.core.models.route import RouteSegment


class FeasibilityResult(BaseModel):
    """Result of checking a requested duration against travel requirements."""

    feasible: bool
    requested_days: int
    suggested_days: int
    travel_days_required: int = Field(..., ge=0)
    exploration_days: int = Field(..., ge=0)
    minimum_required_days: int = Field(..., ge=0)
    segments: list[RouteSegment] = Field(default_factory=list)
    all_overnight: bool = False
    overnight_count: int = 0
    reason: str | None = None

    @model_validator(mode="after")
    def validate_day_arithmetic(self) -> "FeasibilityResult":
        """Keep suggested/minimum days consistent with their components."""
        if self.minimum_required_days != self.exploration_days + self.travel_days_required:
            raise ValueError("minimum_required_days must equal exploration + travel days")
        expected = self.requested_days if self.feasible else self.minimum_required_days
        if self.suggested_days != expected:
            raise ValueError(f"suggested_days must be {expected}, got {self.suggested_days}")
        return self


class TimelineDayKind(str, Enum):
    """Kind of day in the restructured plan."""

    TRAVEL = "TRAVEL"
    EXPLORE = "EXPLORE"


class OvernightArrival(BaseModel):
    """Overnight leg that lands on the morning of an explore day."""

    from_city: str
    hours: float
    distance_km: float


class TimelineDay(BaseModel):
    """One day in the TRAVEL/EXPLORE sequence."""

    day_number: int = Field(..., ge=1)
    kind: TimelineDayKind
    location: str | None = None
    from_city: str | None = None
    to_city: str | None = None
    hours: float | None = None
    overnight_arrival: OvernightArrival | None = None
