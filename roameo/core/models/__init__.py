"""Models package - re-exports for convenience."""

from roameo.core.models.budget import (
    AllocationMeta,
    BudgetAllocation,
    BudgetRisk,
    BudgetType,
    CategoryViolation,
    DailyCostSummary,
    ReconciliationResult,
    RiskLevel,
    StrictBudgetCheck,
)
from roameo.core.models.common import (
    BudgetTier,
    DistanceTier,
    Envelope,
    Geo,
    LocalMode,
    OwnVehicle,
    RouteSource,
    SegmentType,
    TransportMode,
    TravelPreference,
    TravelStyle,
)
from roameo.core.models.feasibility import (
    FeasibilityResult,
    OvernightArrival,
    TimelineDay,
    TimelineDayKind,
)
from roameo.core.models.guard import GuardContext, GuardResult
from roameo.core.models.itinerary import GeneratedActivity, GeneratedDay, Segment, SegmentMetadata
from roameo.core.models.route import RouteSegment, RouteTime
from roameo.core.models.trip import Destination, TripRequest
from roameo.core.models.violations import Violation, ViolationKind, ViolationSeverity

__all__ = [
    # Common
    "Geo",
    "TravelStyle",
    "BudgetTier",
    "TransportMode",
    "TravelPreference",
    "OwnVehicle",
    "LocalMode",
    "SegmentType",
    "DistanceTier",
    "RouteSource",
    "Envelope",
    # Trip
    "Destination",
    "TripRequest",
    # Route
    "RouteTime",
    "RouteSegment",
    # Feasibility
    "FeasibilityResult",
    "TimelineDay",
    "TimelineDayKind",
    "OvernightArrival",
    # Itinerary
    "Segment",
    "SegmentMetadata",
    "GeneratedActivity",
    "GeneratedDay",
    # Guard
    "GuardContext",
    "GuardResult",
    # Budget
    "AllocationMeta",
    "BudgetAllocation",
    "CategoryViolation",
    "ReconciliationResult",
    "DailyCostSummary",
    "RiskLevel",
    "BudgetRisk",
    "BudgetType",
    "StrictBudgetCheck",
    # Violations
    "Violation",
    "ViolationKind",
    "ViolationSeverity",
]
