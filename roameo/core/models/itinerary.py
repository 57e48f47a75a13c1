"""Itinerary models - segments produced by the generator or the guard."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roameo.core.models.common import SegmentType


class SegmentMetadata(BaseModel):
    """Free-form segment metadata; unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    time: str | None = None  # "HH:MM"
    transport_mode: str | None = None
    notes: str | None = None
    arrival_time: str | None = None
    departure_time: str | None = None


class Segment(BaseModel):
    """Single itinerary segment (activity, transport, stay, ...)."""

    type: SegmentType
    title: str
    day_number: int = Field(..., ge=1)
    location: str = ""
    estimated_cost: float = Field(0, ge=0)
    order_index: float = 0
    latitude: float | None = None
    longitude: float | None = None
    metadata: SegmentMetadata = Field(default_factory=SegmentMetadata)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class GeneratedActivity(BaseModel):
    """Activity as returned by the external itinerary generator."""

    title: str
    time: str | None = None
    location: str | None = None
    estimated_cost: float = 0
    notes: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def coerce_cost(cls, v: object) -> object:
        """Generators sometimes emit "" or null for free activities."""
        if v is None or v == "":
            return 0
        return v

    @field_validator("estimated_cost")
    @classmethod
    def validate_cost_not_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("estimated_cost must be >= 0")
        return v


class GeneratedDay(BaseModel):
    """One day of generator output."""

    day_number: int = Field(..., ge=1)
    location: str | None = None
    activities: list[GeneratedActivity] = Field(default_factory=list)
