"""Budget reconciliation: actual itinerary costs against the allocation.

Pure functions of their inputs, recomputed by the caller after every
itinerary change. A category can overshoot its envelope while the trip as
a whole stays balanced; that overshoot is still reported.
"""

from collections.abc import Iterable, Sequence

from roameo.core.models.budget import (
    BudgetAllocation,
    CategoryViolation,
    DailyCostSummary,
    ReconciliationResult,
)
from roameo.core.models.common import Envelope, SegmentType
from roameo.core.models.itinerary import Segment

CATEGORY_SEGMENT_TYPES: dict[Envelope, tuple[SegmentType, ...]] = {
    Envelope.intercity: (
        SegmentType.outbound_travel,
        SegmentType.return_travel,
        SegmentType.intercity_travel,
    ),
    Envelope.accommodation: (SegmentType.accommodation,),
    Envelope.local_transport: (SegmentType.local_transport,),
    Envelope.activity: (SegmentType.activity, SegmentType.gem),
}


def _cost(segments: Iterable[Segment], types: Sequence[SegmentType]) -> float:
    return sum(s.estimated_cost for s in segments if s.type in types)


def derive_reconciliation(
    allocation: BudgetAllocation, segments: Sequence[Segment]
) -> ReconciliationResult:
    """Compare per-category and total costs against the allocation."""
    category_totals: dict[Envelope, int] = {}
    violations: list[CategoryViolation] = []

    for category, types in CATEGORY_SEGMENT_TYPES.items():
        actual = _cost(segments, types)
        category_totals[category] = round(actual)
        envelope = allocation.amount(category)
        if actual > envelope:
            violations.append(
                CategoryViolation(
                    category=category,
                    envelope=envelope,
                    actual=round(actual),
                    overshoot=round(actual - envelope),
                )
            )

    total = sum(s.estimated_cost for s in segments)
    overshoot = max(0.0, total - allocation.total_budget)

    return ReconciliationResult(
        balanced=total <= allocation.total_budget,
        total=round(total),
        budget=allocation.total_budget,
        overshoot=round(overshoot),
        buffer_remaining=max(0, round(allocation.amount(Envelope.buffer) - overshoot)),
        category_totals=category_totals,
        category_violations=violations,
    )


def compute_daily_summary(segments: Sequence[Segment], total_days: int) -> list[DailyCostSummary]:
    """Per-day cost breakdown for days 1..total_days."""
    summary = []
    for day in range(1, total_days + 1):
        day_segs = [s for s in segments if s.day_number == day]
        activity = _cost(day_segs, CATEGORY_SEGMENT_TYPES[Envelope.activity])
        local = _cost(day_segs, CATEGORY_SEGMENT_TYPES[Envelope.local_transport])
        travel = _cost(day_segs, CATEGORY_SEGMENT_TYPES[Envelope.intercity])
        stay = _cost(day_segs, CATEGORY_SEGMENT_TYPES[Envelope.accommodation])
        summary.append(
            DailyCostSummary(
                day_number=day,
                activity_cost=round(activity),
                local_transport_cost=round(local),
                travel_cost=round(travel),
                stay_cost=round(stay),
                total_day_cost=round(activity + local + travel + stay),
                segment_count=len(day_segs),
            )
        )
    return summary
