"""Violation models - budget risks found over an allocation."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# JSON-serializable value types for violation details
JsonValue = str | int | float | bool | None | dict[str, Any] | list[Any]


class ViolationSeverity(str, Enum):
    """Severity levels for budget risks."""

    ADVISORY = "advisory"
    BLOCKING = "blocking"


class ViolationKind(str, Enum):
    """Categories of budget risk."""

    BUDGET = "budget"
    ENVELOPE = "envelope"


class Violation(BaseModel):
    """A budget risk detected over the current allocation.

    Violations are informational: they describe how the current itinerary
    strains the budget so the dashboard can warn the traveler.
    """

    kind: ViolationKind
    code: str  # Machine-usable short code, e.g., "OVER_BUDGET"
    message: str  # Human-readable description (1-2 sentences)
    severity: ViolationSeverity
    affected_categories: list[str] = Field(default_factory=list)
    details: dict[str, JsonValue] = Field(default_factory=dict)
