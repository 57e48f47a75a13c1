"""Trip request models - user input for feasibility and budgeting."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from roameo.core.models.common import BudgetTier, OwnVehicle, TravelPreference, TravelStyle


def same_place(a: str, b: str) -> bool:
    """Case/whitespace-insensitive city comparison."""
    return " ".join(a.split()).lower() == " ".join(b.split()).lower()


class Destination(BaseModel):
    """One stop on the route with the days the traveler wants there."""

    model_config = ConfigDict(frozen=True)

    location: str = Field(..., min_length=1)
    requested_days: Annotated[int, Field(ge=1)] = 1

    @field_validator("location")
    @classmethod
    def validate_location_not_blank(cls, v: str) -> str:
        """Reject whitespace-only city names."""
        if not v.strip():
            raise ValueError("location must not be blank")
        return v


class TripRequest(BaseModel):
    """Immutable trip request.

    `return_location` defaults to `start_location`. Tier and style accept
    their legacy aliases (low/mid/high, relax/explore, ...).
    """

    model_config = ConfigDict(frozen=True)

    start_location: str
    return_location: str | None = None
    destinations: list[Destination] = Field(default_factory=list)
    requested_total_days: Annotated[int, Field(ge=1)]
    travel_style: TravelStyle = TravelStyle.city_explorer
    budget_tier: BudgetTier = BudgetTier.mid_range
    total_budget: Annotated[float, Field(ge=0)] = 0
    currency: str = "INR"
    travelers: Annotated[int, Field(ge=1)] = 1
    travel_preference: TravelPreference = TravelPreference.any
    own_vehicle: OwnVehicle = OwnVehicle.none
    exclude_accommodation: bool = False

    @field_validator("start_location")
    @classmethod
    def validate_start_not_blank(cls, v: str) -> str:
        """A trip must start somewhere."""
        if not v.strip():
            raise ValueError("start_location is required")
        return v

    @field_validator("travel_style", mode="before")
    @classmethod
    def normalize_style(cls, v: object) -> object:
        return TravelStyle.normalize(v)

    @field_validator("budget_tier", mode="before")
    @classmethod
    def normalize_tier(cls, v: object) -> object:
        return BudgetTier.normalize(v)

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="before")
    @classmethod
    def default_return_location(cls, data: Any) -> Any:
        """Round trips return to the start unless told otherwise."""
        if isinstance(data, dict):
            ret = data.get("return_location")
            if not isinstance(ret, str) or not ret.strip():
                data = {**data, "return_location": data.get("start_location")}
        return data

    @property
    def final_location(self) -> str:
        return self.return_location or self.start_location

    @property
    def exploration_days(self) -> int:
        return sum(d.requested_days for d in self.destinations)

    @property
    def total_nights(self) -> int:
        return max(0, self.requested_total_days - 1)
