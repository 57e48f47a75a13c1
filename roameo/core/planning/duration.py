"""Trip Duration Feasibility Planner.

Checks a requested trip length against the travel days the route needs.
Per-segment travel-day cost (tiered overnight rule):

    hours <= 3                                  -> 0 (absorbed into an explore day)
    6 <= hours <= 16 and tier overnight-eligible -> 0 (sleeper bus/train)
    hours <= 12                                 -> 1
    hours <= 24                                 -> 2
    hours > 24                                  -> ceil(hours / 12)

Luxury travelers are not overnight-eligible: they travel by day.
"""

import logging
import math

from roameo.core.config import Settings, get_settings
from roameo.core.models.common import BudgetTier
from roameo.core.models.feasibility import (
    FeasibilityResult,
    OvernightArrival,
    TimelineDay,
    TimelineDayKind,
)
from roameo.core.models.route import RouteSegment
from roameo.core.models.trip import TripRequest, same_place
from roameo.core.routing.provider import RouteTimeProvider, get_default_provider

logger = logging.getLogger(__name__)


def can_travel_overnight(hours: float, tier: BudgetTier, settings: Settings | None = None) -> bool:
    """Whether a leg fits the overnight sleeper band for this tier."""
    settings = settings or get_settings()
    if not tier.overnight_eligible:
        return False
    return settings.overnight_min_hours <= hours <= settings.overnight_max_hours


def compute_travel_days(hours: float, tier: BudgetTier, settings: Settings | None = None) -> int:
    """Travel days a single leg consumes."""
    settings = settings or get_settings()
    if hours <= settings.short_segment_max_hours:
        return 0
    if can_travel_overnight(hours, tier, settings):
        return 0
    if hours <= 12:
        return 1
    if hours <= 24:
        return 2
    return math.ceil(hours / 12)


def build_route(request: TripRequest) -> list[tuple[str, str]]:
    """Directed legs start -> destinations -> return, skipping same-city hops."""
    stops = [request.start_location, *(d.location for d in request.destinations)]
    stops.append(request.final_location)
    return [(a, b) for a, b in zip(stops, stops[1:]) if not same_place(a, b)]


async def plan_trip_duration(
    request: TripRequest,
    provider: RouteTimeProvider | None = None,
    settings: Settings | None = None,
) -> FeasibilityResult:
    """Decide whether `request.requested_total_days` covers exploration plus travel.

    Route lookups run concurrently and never fail; degraded estimates are
    visible through each segment's `source`.
    """
    settings = settings or get_settings()
    requested = request.requested_total_days

    if not request.destinations:
        return FeasibilityResult(
            feasible=True,
            requested_days=requested,
            suggested_days=requested,
            travel_days_required=0,
            exploration_days=requested,
            minimum_required_days=requested,
        )

    if len(request.destinations) == 1 and same_place(
        request.destinations[0].location, request.start_location
    ):
        exploration = request.destinations[0].requested_days
        logger.info(f"[duration_planner] Same-city trip in {request.start_location}, no routing")
        return FeasibilityResult(
            feasible=True,
            requested_days=requested,
            suggested_days=requested,
            travel_days_required=0,
            exploration_days=exploration,
            minimum_required_days=exploration,
        )

    provider = provider or get_default_provider()
    legs = build_route(request)
    routes = await provider.get_route_times(legs)

    tier = request.budget_tier
    segments = [
        RouteSegment(
            from_city=a,
            to_city=b,
            hours=route.hours,
            distance_km=route.distance_km,
            source=route.source,
            can_overnight=can_travel_overnight(route.hours, tier, settings),
            travel_days=compute_travel_days(route.hours, tier, settings),
        )
        for (a, b), route in zip(legs, routes)
    ]

    travel_days = sum(s.travel_days for s in segments)
    exploration = request.exploration_days
    minimum = exploration + travel_days
    feasible = requested >= minimum

    overnight_count = sum(1 for s in segments if s.can_overnight)
    all_overnight = bool(segments) and overnight_count == len(segments)

    if not feasible:
        reason = (
            f"Trip requires {minimum} days ({exploration} exploration + {travel_days} travel), "
            f"but only {requested} requested."
        )
    elif all_overnight:
        reason = f"All travel is overnight, so your {exploration} exploration days are fully preserved."
    else:
        reason = None

    logger.info(
        f"[duration_planner] {len(segments)} legs, travel={travel_days}d "
        f"exploration={exploration}d requested={requested}d feasible={feasible}"
    )

    return FeasibilityResult(
        feasible=feasible,
        requested_days=requested,
        suggested_days=requested if feasible else minimum,
        travel_days_required=travel_days,
        exploration_days=exploration,
        minimum_required_days=minimum,
        segments=segments,
        all_overnight=all_overnight,
        overnight_count=overnight_count,
        reason=reason,
    )


def build_travel_timeline(request: TripRequest, result: FeasibilityResult) -> list[TimelineDay]:
    """Lay out the minimum plan as a TRAVEL/EXPLORE day sequence.

    Daytime legs become TRAVEL days; overnight legs attach to the morning
    of the next explore day. Derived only from the request and result.
    """
    days: list[TimelineDay] = []

    def add(kind: TimelineDayKind, **fields: object) -> None:
        days.append(TimelineDay(day_number=len(days) + 1, kind=kind, **fields))

    if not result.segments:
        if request.destinations:
            for dest in request.destinations:
                for _ in range(dest.requested_days):
                    add(TimelineDayKind.EXPLORE, location=dest.location)
        else:
            for _ in range(result.exploration_days):
                add(TimelineDayKind.EXPLORE, location=request.start_location)
        return days

    # Segments are the non-degenerate legs, in route order
    remaining = iter(result.segments)
    stops = [request.start_location, *(d.location for d in request.destinations)]
    stops.append(request.final_location)

    pending_overnight: OvernightArrival | None = None
    for index, (a, b) in enumerate(zip(stops, stops[1:])):
        if not same_place(a, b):
            seg = next(remaining)
            for _ in range(seg.travel_days):
                add(TimelineDayKind.TRAVEL, from_city=seg.from_city, to_city=seg.to_city, hours=seg.hours)
            if seg.can_overnight:
                pending_overnight = OvernightArrival(
                    from_city=seg.from_city, hours=seg.hours, distance_km=seg.distance_km
                )

        if index < len(request.destinations):
            dest = request.destinations[index]
            for _ in range(dest.requested_days):
                add(TimelineDayKind.EXPLORE, location=dest.location, overnight_arrival=pending_overnight)
                pending_overnight = None

    return days
