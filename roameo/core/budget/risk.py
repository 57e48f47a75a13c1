"""Derived budget risk views over an allocation and its reconciliation."""

import logging
from collections.abc import Sequence

from roameo.core.config import Settings, get_settings
from roameo.core.models.budget import (
    BudgetAllocation,
    BudgetRisk,
    BudgetType,
    ReconciliationResult,
    RiskLevel,
    StrictBudgetCheck,
)
from roameo.core.models.common import Envelope, SegmentType
from roameo.core.models.itinerary import Segment
from roameo.core.models.violations import Violation, ViolationKind, ViolationSeverity

logger = logging.getLogger(__name__)

# Upper bounds (exclusive) of forecast utilization percent
RISK_BANDS = (
    (60, RiskLevel.LOW),
    (80, RiskLevel.MODERATE),
    (100, RiskLevel.HIGH),
)


def risk_level(forecast_percent: int) -> RiskLevel:
    for bound, level in RISK_BANDS:
        if forecast_percent < bound:
            return level
    return RiskLevel.CRITICAL


def verify_total_budget(
    reconciliation: ReconciliationResult, settings: Settings
) -> list[Violation]:
    """Flag totals above budget: advisory within tolerance, blocking beyond."""
    budget = reconciliation.budget
    total = reconciliation.total
    if budget <= 0 or total <= budget:
        return []

    ratio = total / budget
    details = {"total": total, "budget": budget, "ratio": round(ratio, 3)}

    if total <= budget * (1 + settings.near_budget_tolerance):
        return [
            Violation(
                kind=ViolationKind.BUDGET,
                code="NEAR_BUDGET",
                message="Total itinerary cost is slightly above the budget.",
                severity=ViolationSeverity.ADVISORY,
                details=details,
            )
        ]

    tolerance_pct = round(settings.near_budget_tolerance * 100)
    return [
        Violation(
            kind=ViolationKind.BUDGET,
            code="OVER_BUDGET",
            message=f"Total itinerary cost exceeds the budget by more than {tolerance_pct}%.",
            severity=ViolationSeverity.BLOCKING,
            details=details,
        )
    ]


def verify_envelopes(
    allocation: BudgetAllocation,
    reconciliation: ReconciliationResult,
    settings: Settings,
) -> list[Violation]:
    """Flag a depleted buffer, exhausted envelopes and overshooting categories."""
    violations: list[Violation] = []
    budget = allocation.total_budget

    buffer = allocation.amount(Envelope.buffer)
    left = reconciliation.buffer_remaining
    if budget > 0 and left < buffer and left < budget * settings.buffer_low_ratio:
        violations.append(
            Violation(
                kind=ViolationKind.BUDGET,
                code="BUFFER_LOW",
                message="The safety buffer is almost used up.",
                severity=ViolationSeverity.ADVISORY,
                affected_categories=[Envelope.buffer.value],
                details={"buffer_remaining": left, "buffer": buffer},
            )
        )

    for envelope, remaining in allocation.remaining.items():
        if allocation.amount(envelope) > 0 and remaining == 0:
            violations.append(
                Violation(
                    kind=ViolationKind.ENVELOPE,
                    code="ENVELOPE_EXHAUSTED",
                    message=f"The {envelope.value} budget has been fully spent.",
                    severity=ViolationSeverity.ADVISORY,
                    affected_categories=[envelope.value],
                    details={"envelope": allocation.amount(envelope)},
                )
            )

    for cv in reconciliation.category_violations:
        violations.append(
            Violation(
                kind=ViolationKind.ENVELOPE,
                code="CATEGORY_OVERSHOOT",
                message=f"{cv.category.value} costs exceed their envelope by {cv.overshoot}.",
                severity=ViolationSeverity.ADVISORY,
                affected_categories=[cv.category.value],
                details={"envelope": cv.envelope, "actual": cv.actual, "overshoot": cv.overshoot},
            )
        )

    return violations


def assess_budget_risk(
    allocation: BudgetAllocation,
    reconciliation: ReconciliationResult,
    settings: Settings | None = None,
) -> BudgetRisk:
    """Risk level from forecast utilization, plus the flags behind it."""
    settings = settings or get_settings()
    budget = allocation.total_budget
    total = reconciliation.total

    if budget > 0:
        forecast_percent = round(total / budget * 100)
    else:
        forecast_percent = 100 if total > 0 else 0

    violations = verify_total_budget(reconciliation, settings)
    violations.extend(verify_envelopes(allocation, reconciliation, settings))

    level = risk_level(forecast_percent)
    if level in (RiskLevel.HIGH, RiskLevel.CRITICAL):
        logger.info(f"[budget_risk] {level.value}: {forecast_percent}% of {budget} forecast")

    return BudgetRisk(
        level=level,
        forecast_percent=forecast_percent,
        remaining_forecast=budget - total,
        violations=violations,
    )


def check_strict_budget(
    total_budget: float,
    segments: Sequence[Segment],
    new_cost: float,
    budget_type: BudgetType = BudgetType.flexible,
) -> StrictBudgetCheck:
    """Whether adding `new_cost` keeps a strict budget intact.

    Hidden gems are suggestions, not commitments, so they do not count.
    Flexible budgets and unset budgets always allow.
    """
    if budget_type != BudgetType.strict or total_budget <= 0:
        return StrictBudgetCheck(allowed=True)

    current = sum(s.estimated_cost for s in segments if s.type != SegmentType.gem)
    if current + new_cost > total_budget:
        return StrictBudgetCheck(
            allowed=False,
            message=(
                f"Budget exceeded in strict mode. Current: {round(current)}, "
                f"Adding: {round(new_cost)}, Limit: {total_budget:g}"
            ),
        )
    return StrictBudgetCheck(allowed=True)
