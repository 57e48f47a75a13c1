"""Intercity transport and accommodation segments for a trip.

Mode selection rules, in order:
1. An explicit travel preference always wins and is never downgraded.
2. Own vehicle on a road trip drives.
3. Road trips without a vehicle never fly.
4. Otherwise pick by distance tier (local: bus, short: train, medium/long:
   flight), then step down flight -> train -> bus while the intercity
   envelope cannot cover the fare.
"""

import logging

from roameo.core.budget.allocator import deduct_from_envelope
from roameo.core.data.cost_tables import (
    ACCOMMODATION_PER_NIGHT_USD,
    LOCAL_HOP_COSTS_USD,
    LOCAL_HOP_MODES,
    TRANSPORT_COSTS_USD,
    VEHICLE_COST_PER_KM_USD,
    to_currency,
)
from roameo.core.models.budget import BudgetAllocation
from roameo.core.models.common import (
    BudgetTier,
    DistanceTier,
    Envelope,
    LocalMode,
    OwnVehicle,
    SegmentType,
    TransportMode,
    TravelPreference,
    TravelStyle,
)
from roameo.core.models.itinerary import Segment, SegmentMetadata
from roameo.core.models.trip import TripRequest, same_place
from roameo.core.routing.distance import DISTANCE_TIERS, estimate_distance_tier

logger = logging.getLogger(__name__)

MODE_LABELS = {
    TransportMode.flight: "Flight",
    TransportMode.train: "Train",
    TransportMode.bus: "Bus",
    TransportMode.car: "Drive",
    TransportMode.bike: "Ride",
}

_TIER_DEFAULT_MODES = {
    DistanceTier.local: TransportMode.bus,
    DistanceTier.short: TransportMode.train,
    DistanceTier.medium: TransportMode.flight,
    DistanceTier.long: TransportMode.flight,
}

_DOWNGRADES = {
    TransportMode.flight: TransportMode.train,
    TransportMode.train: TransportMode.bus,
}

# order_index slots around the day's activities
OUTBOUND_ORDER = -2.0
ACCOMMODATION_ORDER = 998.0
INTERCITY_ORDER = 999.0
RETURN_ORDER = 1000.0


def calculate_transport_cost(
    mode: TransportMode, tier: DistanceTier, travelers: int, currency: str
) -> int:
    """Fare for all travelers; own vehicles cost fuel for the shared vehicle."""
    if mode in VEHICLE_COST_PER_KM_USD:
        km = DISTANCE_TIERS[tier].distance_km
        return to_currency(km * VEHICLE_COST_PER_KM_USD[mode], currency)
    return to_currency(TRANSPORT_COSTS_USD[mode][tier] * travelers, currency)


def calculate_accommodation_cost(budget_tier: BudgetTier, currency: str) -> int:
    """Cost of one night's stay."""
    return to_currency(ACCOMMODATION_PER_NIGHT_USD[budget_tier], currency)


def calculate_local_transport_cost(
    budget_tier: BudgetTier, distance_km: float, currency: str
) -> tuple[LocalMode, int]:
    """Mode and fare for a paid intra-day hop between two activities."""
    minimum, per_km = LOCAL_HOP_COSTS_USD[budget_tier]
    fare = max(minimum, per_km * distance_km)
    return LOCAL_HOP_MODES[budget_tier], to_currency(fare, currency)


def decide_transport_mode(
    request: TripRequest,
    tier: DistanceTier,
    intercity_remaining: int | None = None,
) -> TransportMode:
    """Choose the intercity mode for one leg.

    Args:
        request: Trip request (preference, vehicle, style, travelers, currency)
        tier: Distance tier of the leg
        intercity_remaining: Intercity envelope left; None disables downgrading
    """
    if request.travel_preference != TravelPreference.any:
        return TransportMode(request.travel_preference.value)

    if request.own_vehicle != OwnVehicle.none and request.travel_style == TravelStyle.road_trip:
        return TransportMode(request.own_vehicle.value)

    mode = _TIER_DEFAULT_MODES[tier]
    if request.travel_style == TravelStyle.road_trip and mode == TransportMode.flight:
        mode = TransportMode.train

    if intercity_remaining is None:
        return mode

    while mode in _DOWNGRADES:
        cost = calculate_transport_cost(mode, tier, request.travelers, request.currency)
        if cost <= intercity_remaining:
            break
        logger.debug(
            f"[transport] {mode.value} costs {cost} > {intercity_remaining} remaining, downgrading"
        )
        mode = _DOWNGRADES[mode]
    return mode


def day_locations(request: TripRequest, total_days: int) -> list[str]:
    """Location of each day 1..total_days, padded with the last known stop."""
    locations = [d.location for d in request.destinations for _ in range(d.requested_days)]
    if not locations:
        locations = [request.start_location]
    while len(locations) < total_days:
        locations.append(locations[-1])
    return locations[:total_days]


def _travel_segment(
    request: TripRequest,
    allocation: BudgetAllocation,
    seg_type: SegmentType,
    from_city: str,
    to_city: str,
    day_number: int,
    order_index: float,
) -> Segment:
    tier = estimate_distance_tier(from_city, to_city)
    mode = decide_transport_mode(request, tier, allocation.remaining_for(Envelope.intercity))
    cost = calculate_transport_cost(mode, tier, request.travelers, request.currency)
    return Segment(
        type=seg_type,
        title=f"{MODE_LABELS[mode]}: {from_city} to {to_city}",
        day_number=day_number,
        location=from_city,
        estimated_cost=cost,
        order_index=order_index,
        metadata=SegmentMetadata(
            transport_mode=mode.value,
            from_city=from_city,
            to_city=to_city,
            distance_tier=tier.value,
            per_person=round(cost / request.travelers),
        ),
    )


def build_transport_segments(
    request: TripRequest,
    allocation: BudgetAllocation,
    arrival_time: str | None = None,
    departure_time: str | None = None,
) -> tuple[list[Segment], BudgetAllocation]:
    """Build outbound, intercity, return and accommodation segments.

    Each segment's cost is deducted from its envelope; the updated
    allocation is returned alongside the segments.

    Args:
        request: Trip request
        allocation: Allocation to draw from (meta.total_days sets the trip length)
        arrival_time: Known outbound arrival "HH:MM", stamped on the outbound leg
        departure_time: Known return departure "HH:MM", stamped on the return leg
    """
    total_days = allocation.meta.total_days
    segments: list[Segment] = []

    if not request.destinations:
        return segments, allocation

    first = request.destinations[0].location
    if not same_place(request.start_location, first):
        seg = _travel_segment(
            request, allocation, SegmentType.outbound_travel,
            request.start_location, first, 1, OUTBOUND_ORDER,
        )
        seg.metadata.arrival_time = arrival_time
        segments.append(seg)
        allocation = deduct_from_envelope(allocation, Envelope.intercity, seg.estimated_cost)

    elapsed = 0
    for current, following in zip(request.destinations, request.destinations[1:]):
        elapsed += current.requested_days
        if same_place(current.location, following.location):
            continue
        seg = _travel_segment(
            request, allocation, SegmentType.intercity_travel,
            current.location, following.location, min(elapsed, total_days), INTERCITY_ORDER,
        )
        segments.append(seg)
        allocation = deduct_from_envelope(allocation, Envelope.intercity, seg.estimated_cost)

    last = request.destinations[-1].location
    if not same_place(last, request.final_location):
        seg = _travel_segment(
            request, allocation, SegmentType.return_travel,
            last, request.final_location, total_days, RETURN_ORDER,
        )
        seg.metadata.departure_time = departure_time
        segments.append(seg)
        allocation = deduct_from_envelope(allocation, Envelope.intercity, seg.estimated_cost)

    if not request.exclude_accommodation:
        nightly = calculate_accommodation_cost(request.budget_tier, request.currency)
        locations = day_locations(request, total_days)
        for night in range(1, allocation.meta.total_nights + 1):
            segments.append(
                Segment(
                    type=SegmentType.accommodation,
                    title=f"{request.budget_tier.value.capitalize()} stay in {locations[night - 1]}",
                    day_number=night,
                    location=locations[night - 1],
                    estimated_cost=nightly,
                    order_index=ACCOMMODATION_ORDER,
                    metadata=SegmentMetadata(accommodation_tier=request.budget_tier.value),
                )
            )
            allocation = deduct_from_envelope(allocation, Envelope.accommodation, nightly)

    logger.info(
        f"[transport] Built {len(segments)} segments, intercity remaining "
        f"{allocation.remaining_for(Envelope.intercity)}"
    )
    return segments, allocation
