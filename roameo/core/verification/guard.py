"""Feasibility Guard - sanitizes generated activities before they are shown.

Each pass takes a day's activity segments and returns a new list, appending
human-readable corrections to a shared issue log. Passes never raise on
odd input; they trim, clamp, shift or reorder.

Activities dated past the last trip day are dropped first.

Pass order per day:
    1. activity count cap (per travel style)
    2. single-day intercity cap
    3. arrival / departure constraints
    4. daily time window
    5. cost clamp (per tier and currency)
    6. nearest-neighbour reordering
    7. local transport insertion

Activity envelope scaling runs across all days between 5 and 6.
"""

import logging
from collections.abc import Iterable, Sequence

from roameo.core.budget.allocator import deduct_from_envelope
from roameo.core.config import Settings, get_settings
from roameo.core.data.cost_tables import activity_cost_cap
from roameo.core.models.budget import BudgetAllocation
from roameo.core.models.common import BudgetTier, Envelope, LocalMode, SegmentType, TravelStyle
from roameo.core.models.guard import GuardContext, GuardResult
from roameo.core.models.itinerary import GeneratedDay, Segment, SegmentMetadata
from roameo.core.models.trip import same_place
from roameo.core.planning.transport import calculate_local_transport_cost
from roameo.core.routing.distance import haversine_km

logger = logging.getLogger(__name__)

STYLE_LIMITS: dict[TravelStyle, int] = {
    TravelStyle.relaxation: 3,
    TravelStyle.city_explorer: 4,
    TravelStyle.adventure: 5,
    TravelStyle.business: 2,
    TravelStyle.road_trip: 4,
}

DEFAULT_START_MIN = 8 * 60

ACTIVITY_TYPES = (SegmentType.activity, SegmentType.gem)


# --- time helpers -------------------------------------------------------------


def parse_time(value: str | None) -> int:
    """'HH:MM' to minutes since midnight; missing or malformed parts default to 08:00."""
    if not value:
        return DEFAULT_START_MIN
    hours, _, minutes = value.strip().partition(":")
    h = int(hours) if hours.isdigit() else 8
    m = int(minutes[:2]) if minutes[:2].isdigit() else 0
    return h * 60 + m


def format_time(minutes: int) -> str:
    minutes = max(0, min(minutes, 24 * 60 - 1))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _by_order(segments: Iterable[Segment]) -> list[Segment]:
    return sorted(segments, key=lambda s: s.order_index)


def _by_time(segments: Iterable[Segment]) -> list[Segment]:
    return sorted(segments, key=lambda s: (parse_time(s.metadata.time), s.order_index))


# --- input conversion ---------------------------------------------------------


def segments_from_days(days: Sequence[GeneratedDay]) -> list[Segment]:
    """Convert generator output into activity segments.

    Day location fills in for activities without their own; order_index
    follows the generator's order within each day.
    """
    segments = []
    for day in days:
        for index, activity in enumerate(day.activities):
            segments.append(
                Segment(
                    type=SegmentType.activity,
                    title=activity.title,
                    day_number=day.day_number,
                    location=activity.location or day.location or "",
                    estimated_cost=activity.estimated_cost,
                    order_index=index,
                    latitude=activity.latitude,
                    longitude=activity.longitude,
                    metadata=SegmentMetadata(time=activity.time or "09:00", notes=activity.notes),
                )
            )
    return segments


# --- passes -------------------------------------------------------------------


def enforce_day_range(
    segments: list[Segment], total_days: int, issues: list[str]
) -> list[Segment]:
    """Drop activities scheduled after the last day of the trip."""
    kept = []
    for seg in segments:
        if seg.day_number > total_days:
            issues.append(
                f'Day {seg.day_number}: "{seg.title}" is outside the {total_days}-day trip, removed'
            )
            continue
        kept.append(seg)
    return kept


def enforce_activity_count_limit(
    day: int, segments: list[Segment], style: TravelStyle, issues: list[str]
) -> list[Segment]:
    """Keep the earliest activities up to the style's daily cap."""
    cap = STYLE_LIMITS[style]
    if len(segments) <= cap:
        return list(segments)
    issues.append(f"Day {day}: Exceeded {style.value} style limit ({len(segments)} to {cap})")
    return _by_order(segments)[:cap]


def enforce_intercity_feasibility(
    day: int,
    segments: list[Segment],
    context: GuardContext,
    issues: list[str],
    settings: Settings,
) -> list[Segment]:
    """Single-day intercity trips leave room for only a couple of activities."""
    if context.total_days != 1 or same_place(context.start_location, context.destination):
        return list(segments)
    cap = settings.intercity_single_day_cap
    if len(segments) <= cap:
        return list(segments)
    issues.append(
        f"Day {day}: Reduced from {len(segments)} to {cap} activities (1-day intercity trip)"
    )
    return _by_order(segments)[:cap]


def enforce_arrival_constraint(
    segments: list[Segment],
    transport_segments: Sequence[Segment],
    issues: list[str],
    settings: Settings,
) -> list[Segment]:
    """Shift day-1 activities that start before the outbound arrival plus buffer."""
    outbound = next((s for s in transport_segments if s.type == SegmentType.outbound_travel), None)
    if outbound is None or not outbound.metadata.arrival_time:
        return list(segments)

    earliest = parse_time(outbound.metadata.arrival_time) + settings.arrival_buffer_min
    result = []
    for seg in segments:
        if seg.day_number == 1 and parse_time(seg.metadata.time) < earliest:
            shifted = format_time(earliest)
            issues.append(
                f'Day 1: "{seg.title}" starts at {seg.metadata.time} before arrival, shifted to {shifted}'
            )
            seg = seg.model_copy(
                update={"metadata": seg.metadata.model_copy(update={"time": shifted})}
            )
        result.append(seg)
    return result


def enforce_departure_constraint(
    segments: list[Segment],
    transport_segments: Sequence[Segment],
    total_days: int,
    issues: list[str],
    settings: Settings,
) -> list[Segment]:
    """Drop the last activity of the final day if it runs into the departure buffer."""
    ret = next((s for s in transport_segments if s.type == SegmentType.return_travel), None)
    if ret is None or not ret.metadata.departure_time:
        return list(segments)

    last_day = [s for s in segments if s.day_number == total_days]
    if not last_day:
        return list(segments)

    latest_end = parse_time(ret.metadata.departure_time) - settings.departure_buffer_min
    last = _by_time(last_day)[-1]
    if parse_time(last.metadata.time) + settings.activity_duration_min <= latest_end:
        return list(segments)

    issues.append(f'Day {total_days}: "{last.title}" overlaps departure buffer, removed')
    return [s for s in segments if s is not last]


def enforce_daily_time_limit(
    day: int, segments: list[Segment], issues: list[str], settings: Settings
) -> list[Segment]:
    """Trim from the end of the day until activities plus transitions fit the window."""
    kept = _by_order(segments)
    duration = settings.activity_duration_min
    buffer = settings.activity_buffer_min

    def used(n: int) -> int:
        return n * duration + max(0, n - 1) * buffer

    removed = 0
    while len(kept) > 1 and used(len(kept)) > settings.daily_window_min:
        dropped = kept.pop()
        removed += 1
        issues.append(
            f'Day {day}: Time exceeded {settings.daily_window_min}min, removed "{dropped.title}"'
        )
    if removed:
        logger.info(f"[guard] Day {day}: trimmed {removed} activities for the daily time window")
    return kept


def clamp_activity_costs(
    segments: list[Segment], tier: BudgetTier, currency: str, issues: list[str]
) -> list[Segment]:
    """Cap each activity's cost at the tier ceiling for the trip currency."""
    cap = activity_cost_cap(tier, currency)
    result = []
    for seg in segments:
        if seg.estimated_cost > cap:
            issues.append(
                f'Clamped "{seg.title}": {currency} {seg.estimated_cost:g} to {currency} {cap}'
            )
            seg = seg.model_copy(update={"estimated_cost": cap})
        result.append(seg)
    return result


def enforce_activity_envelope(
    segments: list[Segment],
    allocation: BudgetAllocation | None,
    issues: list[str],
) -> tuple[list[Segment], BudgetAllocation | None]:
    """Scale activity costs down proportionally to fit the activity envelope, then deduct."""
    if allocation is None:
        return list(segments), allocation

    envelope = allocation.amount(Envelope.activity)
    total = sum(s.estimated_cost for s in segments)
    result = list(segments)
    if envelope > 0 and total > envelope:
        factor = envelope / total
        issues.append(
            f"Activity costs {total:g} exceed the activity budget {envelope}, scaled by {factor:.2f}"
        )
        result = [s.model_copy(update={"estimated_cost": round(s.estimated_cost * factor)}) for s in segments]
        # Rounding can push the scaled sum just over the envelope
        excess = sum(s.estimated_cost for s in result) - envelope
        for i in sorted(range(len(result)), key=lambda i: -result[i].estimated_cost):
            if excess <= 0:
                break
            take = min(excess, result[i].estimated_cost)
            result[i] = result[i].model_copy(update={"estimated_cost": result[i].estimated_cost - take})
            excess -= take

    spent = sum(s.estimated_cost for s in result)
    return result, deduct_from_envelope(allocation, Envelope.activity, spent)


def nearest_neighbor_order(segments: Sequence[Segment]) -> list[Segment]:
    """Greedy nearest-neighbour walk over geocoded activities.

    Starts at the earliest activity by (time, order_index) and repeatedly
    visits the closest unvisited one; ties go to the earlier original
    position. A heuristic for less backtracking, not an optimal tour.
    """
    remaining = _by_time(segments)
    if len(remaining) <= 1:
        return remaining

    route = [remaining.pop(0)]
    while remaining:
        current = route[-1]
        nearest = min(
            range(len(remaining)),
            key=lambda i: (
                haversine_km(current.latitude, current.longitude, remaining[i].latitude, remaining[i].longitude),
                remaining[i].order_index,
            ),
        )
        route.append(remaining.pop(nearest))
    return route


def reorder_by_proximity(segments: list[Segment]) -> list[Segment]:
    """Reorder a day's activities by proximity and renumber order_index.

    Activities without coordinates keep their relative order after the
    geocoded ones.
    """
    geocoded = [s for s in segments if s.has_coordinates]
    if len(geocoded) < 2:
        return _by_order(segments)

    others = _by_order(s for s in segments if not s.has_coordinates)
    ordered = nearest_neighbor_order(geocoded) + others
    return [s.model_copy(update={"order_index": float(i)}) for i, s in enumerate(ordered)]


def insert_local_transport(
    day: int,
    segments: list[Segment],
    tier: BudgetTier,
    currency: str,
    allocation: BudgetAllocation | None,
    issues: list[str],
    settings: Settings,
) -> tuple[list[Segment], BudgetAllocation | None]:
    """Insert a hop between consecutive activities that are apart but still local.

    Short hops are walked at no cost. Longer ones are paid from the
    local_transport envelope and skipped (with an issue) once it cannot
    cover the fare. Identical or missing coordinates get no hop.
    """
    ordered = _by_order(segments)
    result: list[Segment] = []
    for prev, curr in zip(ordered, ordered[1:] + [None]):
        result.append(prev)
        if curr is None or not (prev.has_coordinates and curr.has_coordinates):
            continue

        distance = haversine_km(prev.latitude, prev.longitude, curr.latitude, curr.longitude)
        if distance <= settings.local_transport_min_km:
            continue
        if distance > settings.max_intraday_distance_km:
            issues.append(
                f'Day {day}: "{curr.title}" is {distance:.1f}km from "{prev.title}", no local transport added'
            )
            continue

        if distance <= settings.local_transport_walk_km:
            mode, cost = LocalMode.walk, 0
        else:
            mode, cost = calculate_local_transport_cost(tier, distance, currency)
            if allocation is not None and cost > allocation.remaining_for(Envelope.local_transport):
                issues.append(
                    f'Day {day}: Local transport budget exhausted, no ride from "{prev.title}" to "{curr.title}"'
                )
                continue
            if allocation is not None:
                allocation = deduct_from_envelope(allocation, Envelope.local_transport, cost)

        result.append(
            Segment(
                type=SegmentType.local_transport,
                title=f"{mode.value.replace('_', ' ').capitalize()} to {curr.title}",
                day_number=day,
                location=curr.location,
                estimated_cost=cost,
                # Between the two activities
                order_index=prev.order_index + 0.5,
                metadata=SegmentMetadata(
                    transport_mode=mode.value,
                    distance_km=round(distance, 2),
                    time=prev.metadata.time,
                ),
            )
        )
    return result, allocation


# --- entry point --------------------------------------------------------------


def apply_feasibility_guard(
    context: GuardContext,
    activity_segments: Sequence[Segment],
    transport_segments: Sequence[Segment] = (),
    settings: Settings | None = None,
) -> GuardResult:
    """Run every guard pass over the generated activities.

    Args:
        context: Trip parameters and the current allocation (optional)
        activity_segments: Activity/gem segments from the itinerary source
        transport_segments: Outbound/intercity/return legs (for arrival/departure)
        settings: Settings override

    Returns:
        GuardResult with activities and inserted local transport, the issue
        log, and the allocation after activity and local-transport deductions.
    """
    settings = settings or get_settings()
    issues: list[str] = []
    allocation = context.allocation

    activities = [s for s in activity_segments if s.type in ACTIVITY_TYPES]
    activities = enforce_day_range(activities, context.total_days, issues)
    days = sorted({s.day_number for s in activities})

    # Per-day caps first; arrival/departure need the whole trip
    capped: list[Segment] = []
    for day in days:
        day_segs = [s for s in activities if s.day_number == day]
        day_segs = enforce_activity_count_limit(day, day_segs, context.travel_style, issues)
        day_segs = enforce_intercity_feasibility(day, day_segs, context, issues, settings)
        capped.extend(day_segs)

    capped = enforce_arrival_constraint(capped, transport_segments, issues, settings)
    capped = enforce_departure_constraint(capped, transport_segments, context.total_days, issues, settings)

    timed: list[Segment] = []
    for day in days:
        day_segs = [s for s in capped if s.day_number == day]
        timed.extend(enforce_daily_time_limit(day, day_segs, issues, settings))

    clamped = clamp_activity_costs(timed, context.budget_tier, context.currency, issues)
    scaled, allocation = enforce_activity_envelope(clamped, allocation, issues)

    output: list[Segment] = []
    for day in days:
        day_segs = reorder_by_proximity([s for s in scaled if s.day_number == day])
        day_segs, allocation = insert_local_transport(
            day, day_segs, context.budget_tier, context.currency, allocation, issues, settings
        )
        output.extend(day_segs)

    if issues:
        logger.warning(f"[guard] {len(issues)} corrections applied")
        for issue in issues:
            logger.debug(f"[guard]   {issue}")

    return GuardResult(segments=output, issues=issues, allocation=allocation)
