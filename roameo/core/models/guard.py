"""Guard models - inputs and outputs of the itinerary feasibility guard."""

from pydantic import BaseModel, Field

from roameo.core.models.budget import BudgetAllocation
from roameo.core.models.common import BudgetTier, TravelStyle
from roameo.core.models.itinerary import Segment


class GuardContext(BaseModel):
    """Trip parameters the guard passes need."""

    start_location: str
    destination: str
    total_days: int = Field(..., ge=1)
    travel_style: TravelStyle = TravelStyle.city_explorer
    budget_tier: BudgetTier = BudgetTier.mid_range
    currency: str = "INR"
    allocation: BudgetAllocation | None = None


class GuardResult(BaseModel):
    """Sanitized segments plus the corrections that were made."""

    segments: list[Segment]
    issues: list[str] = Field(default_factory=list)
    allocation: BudgetAllocation | None = None
