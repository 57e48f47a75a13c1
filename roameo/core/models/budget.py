"""Budget models - envelope allocation, reconciliation, and risk views."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from roameo.core.models.common import BudgetTier, Envelope, TravelStyle
from roameo.core.models.violations import Violation


class AllocationMeta(BaseModel):
    """Inputs and ratios used for an allocation (audit/display)."""

    ratio_table_version: str
    ratios: dict[Envelope, float]
    travel_style: TravelStyle
    budget_tier: BudgetTier
    total_days: int
    total_nights: int
    travelers: int
    has_own_vehicle: bool
    exclude_accommodation: bool


class BudgetAllocation(BaseModel):
    """Total budget partitioned into envelopes with remaining balances."""

    total_budget: int = Field(..., ge=0)
    envelopes: dict[Envelope, int]
    remaining: dict[Envelope, int]
    activity_per_day: int = 0
    accommodation_per_night: int = 0
    meta: AllocationMeta

    @model_validator(mode="after")
    def validate_remaining_within_envelope(self) -> "BudgetAllocation":
        """Every remaining balance is bounded by its envelope."""
        for key, left in self.remaining.items():
            if left > self.envelopes.get(key, 0):
                raise ValueError(f"{key.value}_remaining exceeds its allocation")
        return self

    def amount(self, envelope: Envelope) -> int:
        return self.envelopes.get(envelope, 0)

    def remaining_for(self, envelope: Envelope) -> int:
        return self.remaining.get(envelope, 0)

    @property
    def allocated_total(self) -> int:
        return sum(self.envelopes.values())


class CategoryViolation(BaseModel):
    """A category whose consumption exceeds its own envelope."""

    category: Envelope
    envelope: int
    actual: int
    overshoot: int


class ReconciliationResult(BaseModel):
    """Actual itinerary costs compared against the allocation."""

    balanced: bool
    total: int
    budget: int
    overshoot: int = Field(..., ge=0)
    buffer_remaining: int = Field(..., ge=0)
    category_totals: dict[Envelope, int]
    category_violations: list[CategoryViolation] = Field(default_factory=list)


class RiskLevel(str, Enum):
    """Forecast utilization bands."""

    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class BudgetRisk(BaseModel):
    """Derived risk view over an allocation and its reconciliation."""

    level: RiskLevel
    forecast_percent: int
    remaining_forecast: int
    violations: list[Violation] = Field(default_factory=list)


class BudgetType(str, Enum):
    """How hard the total budget limit is."""

    flexible = "flexible"
    strict = "strict"


class StrictBudgetCheck(BaseModel):
    """Outcome of checking a new cost against a strict budget."""

    allowed: bool
    message: str | None = None


class DailyCostSummary(BaseModel):
    """Per-day cost breakdown for the budget dashboard."""

    day_number: int = Field(..., ge=1)
    activity_cost: int = 0
    local_transport_cost: int = 0
    travel_cost: int = 0
    stay_cost: int = 0
    total_day_cost: int = 0
    segment_count: int = 0
