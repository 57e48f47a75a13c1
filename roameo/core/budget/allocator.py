"""Budget Envelope Allocator.

Splits a trip budget into category envelopes before any itinerary exists.
Ratios come from a closed, versioned table; nothing here depends on live
prices and the same request always yields the same allocation.
"""

import logging

from roameo.core.models.budget import AllocationMeta, BudgetAllocation
from roameo.core.models.common import BudgetTier, Envelope, OwnVehicle, TravelStyle
from roameo.core.models.trip import TripRequest

logger = logging.getLogger(__name__)

RATIO_TABLE_VERSION = "2026-02"

DEFAULT_RATIOS: dict[Envelope, float] = {
    Envelope.intercity: 0.20,
    Envelope.accommodation: 0.30,
    Envelope.local_transport: 0.05,
    Envelope.activity: 0.37,
    Envelope.buffer: 0.08,
}

# Own vehicle: fuel instead of tickets, flexible lodging, more experiences
ROAD_TRIP_RATIOS: dict[Envelope, float] = {
    Envelope.intercity: 0.10,
    Envelope.accommodation: 0.20,
    Envelope.local_transport: 0.03,
    Envelope.activity: 0.55,
    Envelope.buffer: 0.12,
}

LUXURY_RATIOS: dict[Envelope, float] = {
    Envelope.intercity: 0.22,
    Envelope.accommodation: 0.35,
    Envelope.local_transport: 0.03,
    Envelope.activity: 0.30,
    Envelope.buffer: 0.05,
    Envelope.upgrade_pool: 0.05,
}

# Envelopes whose consumption is tracked in `remaining`
TRACKED_ENVELOPES = (
    Envelope.intercity,
    Envelope.accommodation,
    Envelope.local_transport,
    Envelope.activity,
)


def select_ratios(request: TripRequest) -> dict[Envelope, float]:
    """Pick and adjust the ratio table for a request; result sums to 1."""
    if request.travel_style == TravelStyle.road_trip:
        ratios = dict(ROAD_TRIP_RATIOS)
    elif request.budget_tier == BudgetTier.luxury:
        ratios = dict(LUXURY_RATIOS)
    else:
        ratios = dict(DEFAULT_RATIOS)

    if request.own_vehicle != OwnVehicle.none and request.travel_style != TravelStyle.road_trip:
        saved = ratios[Envelope.intercity] * 0.5
        ratios[Envelope.intercity] -= saved
        ratios[Envelope.activity] += saved

    if request.exclude_accommodation:
        ratios[Envelope.accommodation] = 0.0

    ratio_sum = sum(ratios.values())
    return {k: v / ratio_sum for k, v in ratios.items()}


def derive_allocation(request: TripRequest, total_days: int | None = None) -> BudgetAllocation:
    """Partition `request.total_budget` into envelopes.

    Args:
        request: Trip request
        total_days: Confirmed day count (default: request.requested_total_days),
            e.g. the planner's suggested days once the traveler accepts them

    The buffer absorbs rounding, so the envelopes sum to the rounded total exactly.
    """
    days = total_days or request.requested_total_days
    nights = max(0, days - 1)
    total = round(request.total_budget)
    ratios = select_ratios(request)

    envelopes = {k: round(total * r) for k, r in ratios.items() if k != Envelope.buffer}
    buffer = total - sum(envelopes.values())
    if buffer < 0:
        # Only reachable for tiny budgets where every envelope rounded up
        envelopes[Envelope.activity] += buffer
        buffer = 0
    envelopes[Envelope.buffer] = buffer

    activity = envelopes[Envelope.activity]
    accommodation = envelopes[Envelope.accommodation]

    allocation = BudgetAllocation(
        total_budget=total,
        envelopes=envelopes,
        remaining={k: envelopes[k] for k in TRACKED_ENVELOPES},
        activity_per_day=round(activity / days) if days > 0 else activity,
        accommodation_per_night=round(accommodation / nights) if nights > 0 else 0,
        meta=AllocationMeta(
            ratio_table_version=RATIO_TABLE_VERSION,
            ratios=ratios,
            travel_style=request.travel_style,
            budget_tier=request.budget_tier,
            total_days=days,
            total_nights=nights,
            travelers=request.travelers,
            has_own_vehicle=request.own_vehicle != OwnVehicle.none,
            exclude_accommodation=request.exclude_accommodation,
        ),
    )
    logger.debug(
        f"[allocator] total={total} "
        + " ".join(f"{k.value}={v}" for k, v in envelopes.items())
    )
    return allocation


def deduct_from_envelope(
    allocation: BudgetAllocation, envelope: Envelope, cost: float
) -> BudgetAllocation:
    """Return a copy with `cost` consumed from `envelope`; remaining floors at 0.

    Untracked envelopes (buffer, upgrade pool) are returned unchanged.
    """
    if envelope not in allocation.remaining:
        return allocation
    remaining = dict(allocation.remaining)
    remaining[envelope] = max(0, round(remaining[envelope] - cost))
    return allocation.model_copy(update={"remaining": remaining})
