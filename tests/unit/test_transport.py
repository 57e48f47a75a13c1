"""Tests for intercity mode selection and transport/accommodation segments."""

import pytest

from roameo.core.budget.allocator import derive_allocation
from roameo.core.models.common import DistanceTier, Envelope, SegmentType, TransportMode
from roameo.core.models.trip import Destination, TripRequest
from roameo.core.planning.transport import (
    build_transport_segments,
    calculate_accommodation_cost,
    calculate_local_transport_cost,
    calculate_transport_cost,
    day_locations,
    decide_transport_mode,
)


def make_request(**overrides) -> TripRequest:
    data = {
        "start_location": "Mumbai",
        "destinations": [
            Destination(location="Goa", requested_days=2),
            Destination(location="Pune", requested_days=1),
        ],
        "requested_total_days": 3,
        "budget_tier": "mid-range",
        "total_budget": 100000,
    }
    data.update(overrides)
    return TripRequest(**data)


def test_transport_cost_scales_with_travelers() -> None:
    assert calculate_transport_cost(TransportMode.flight, DistanceTier.medium, 1, "INR") == 12450
    assert calculate_transport_cost(TransportMode.flight, DistanceTier.medium, 2, "INR") == 24900
    assert calculate_transport_cost(TransportMode.train, DistanceTier.short, 1, "USD") == 15


def test_own_vehicle_cost_is_shared() -> None:
    solo = calculate_transport_cost(TransportMode.car, DistanceTier.medium, 1, "INR")
    group = calculate_transport_cost(TransportMode.car, DistanceTier.medium, 4, "INR")

    assert solo == group == 4250


def test_accommodation_and_local_costs() -> None:
    assert calculate_accommodation_cost(make_request().budget_tier, "INR") == 4980

    mode, fare = calculate_local_transport_cost(make_request().budget_tier, 2.0, "INR")
    assert mode.value == "taxi"
    assert fare == 166  # minimum fare applies below 5 km


def test_explicit_preference_is_never_downgraded() -> None:
    request = make_request(travel_preference="flight")

    assert decide_transport_mode(request, DistanceTier.long, intercity_remaining=0) == TransportMode.flight


def test_auto_mode_steps_down_to_bus() -> None:
    request = make_request()

    assert decide_transport_mode(request, DistanceTier.long) == TransportMode.flight
    assert decide_transport_mode(request, DistanceTier.long, intercity_remaining=0) == TransportMode.bus


@pytest.mark.parametrize(
    ("tier", "expected"),
    [
        (DistanceTier.local, TransportMode.bus),
        (DistanceTier.short, TransportMode.train),
        (DistanceTier.medium, TransportMode.flight),
        (DistanceTier.long, TransportMode.flight),
    ],
)
def test_auto_mode_by_tier(tier: DistanceTier, expected: TransportMode) -> None:
    assert decide_transport_mode(make_request(), tier) == expected


def test_road_trip_modes() -> None:
    driving = make_request(travel_style="road_trip", own_vehicle="car")
    no_vehicle = make_request(travel_style="road_trip")
    city_with_car = make_request(own_vehicle="bike")

    assert decide_transport_mode(driving, DistanceTier.long, 0) == TransportMode.car
    assert decide_transport_mode(no_vehicle, DistanceTier.long) == TransportMode.train
    assert decide_transport_mode(city_with_car, DistanceTier.medium) == TransportMode.flight


def test_day_locations_pads_with_last_stop() -> None:
    request = make_request()

    assert day_locations(request, 5) == ["Goa", "Goa", "Pune", "Pune", "Pune"]
    assert day_locations(request, 2) == ["Goa", "Goa"]


def test_segments_for_multi_city_trip() -> None:
    request = make_request()
    allocation = derive_allocation(request)

    segments, updated = build_transport_segments(request, allocation)

    travel = [s for s in segments if s.type != SegmentType.accommodation]
    assert [(s.type, s.day_number, s.metadata.transport_mode, s.estimated_cost) for s in travel] == [
        (SegmentType.outbound_travel, 1, "flight", 12450),
        # 7550 left cannot cover a second flight
        (SegmentType.intercity_travel, 2, "train", 3320),
        (SegmentType.return_travel, 3, "train", 1245),
    ]
    assert travel[0].title == "Flight: Mumbai to Goa"

    stays = [s for s in segments if s.type == SegmentType.accommodation]
    assert [(s.day_number, s.location, s.estimated_cost) for s in stays] == [
        (1, "Goa", 4980),
        (2, "Goa", 4980),
    ]

    assert updated.remaining_for(Envelope.intercity) == 20000 - 12450 - 3320 - 1245
    assert updated.remaining_for(Envelope.accommodation) == 30000 - 2 * 4980
    # Input allocation is untouched
    assert allocation.remaining_for(Envelope.intercity) == 20000


def test_explicit_flight_survives_empty_envelope() -> None:
    request = make_request(total_budget=1000, travel_preference="flight")
    allocation = derive_allocation(request)

    segments, updated = build_transport_segments(request, allocation)

    modes = [s.metadata.transport_mode for s in segments if s.type != SegmentType.accommodation]
    assert modes == ["flight", "flight", "flight"]
    assert updated.remaining_for(Envelope.intercity) == 0


def test_exclude_accommodation_skips_stays() -> None:
    request = make_request(exclude_accommodation=True)

    segments, updated = build_transport_segments(request, derive_allocation(request))

    assert not any(s.type == SegmentType.accommodation for s in segments)
    assert updated.amount(Envelope.accommodation) == 0


def test_arrival_and_departure_times_are_stamped() -> None:
    request = make_request()

    segments, _ = build_transport_segments(
        request, derive_allocation(request), arrival_time="10:00", departure_time="18:00"
    )

    outbound = next(s for s in segments if s.type == SegmentType.outbound_travel)
    ret = next(s for s in segments if s.type == SegmentType.return_travel)
    assert outbound.metadata.arrival_time == "10:00"
    assert ret.metadata.departure_time == "18:00"


def test_staycation_has_no_segments() -> None:
    request = TripRequest(start_location="Goa", requested_total_days=2, total_budget=5000)

    segments, updated = build_transport_segments(request, derive_allocation(request))

    assert segments == []
    assert updated.remaining_for(Envelope.intercity) == updated.amount(Envelope.intercity)


def test_same_city_stops_get_no_travel_leg() -> None:
    request = make_request(
        destinations=[Destination(location="Mumbai", requested_days=2)],
        requested_total_days=2,
    )

    segments, _ = build_transport_segments(request, derive_allocation(request))

    assert [s.type for s in segments] == [SegmentType.accommodation]
