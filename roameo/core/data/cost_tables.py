"""Consolidated currency and tier cost tables.

Base costs are USD and converted with approximate market multipliers. The
allocator, transport builder and guard all read from here.
"""

from roameo.core.models.common import BudgetTier, DistanceTier, LocalMode, TransportMode

CURRENCY_MULTIPLIERS: dict[str, float] = {
    "USD": 1, "EUR": 0.92, "GBP": 0.79, "INR": 83, "JPY": 149, "AUD": 1.55,
    "CAD": 1.37, "SGD": 1.35, "THB": 35, "MYR": 4.7, "KRW": 1330,
    "BRL": 5, "ZAR": 18, "AED": 3.67, "SAR": 3.75, "CHF": 0.88,
    "NZD": 1.67, "SEK": 10.5, "NOK": 10.8, "DKK": 6.9, "MXN": 17,
    "PHP": 56, "VND": 24500, "IDR": 15600, "TWD": 31.5, "HKD": 7.8,
    "CNY": 7.2, "RUB": 92, "TRY": 30, "PLN": 4, "CZK": 23,
    "HUF": 360, "ILS": 3.7, "EGP": 31, "PKR": 280, "LKR": 320,
    "BDT": 110, "NPR": 133,
}

# Per traveler, by distance tier
TRANSPORT_COSTS_USD: dict[TransportMode, dict[DistanceTier, float]] = {
    TransportMode.flight: {
        DistanceTier.local: 80, DistanceTier.short: 80,
        DistanceTier.medium: 150, DistanceTier.long: 300,
    },
    TransportMode.train: {
        DistanceTier.local: 15, DistanceTier.short: 15,
        DistanceTier.medium: 40, DistanceTier.long: 80,
    },
    TransportMode.bus: {
        DistanceTier.local: 8, DistanceTier.short: 8,
        DistanceTier.medium: 20, DistanceTier.long: 45,
    },
}

# Fuel cost per km for own vehicles
VEHICLE_COST_PER_KM_USD: dict[TransportMode, float] = {
    TransportMode.car: 0.08,
    TransportMode.bike: 0.03,
}

ACCOMMODATION_PER_NIGHT_USD: dict[BudgetTier, float] = {
    BudgetTier.budget: 15,
    BudgetTier.mid_range: 60,
    BudgetTier.luxury: 200,
}

# Intra-day hop between activities: (minimum fare, per km)
LOCAL_HOP_COSTS_USD: dict[BudgetTier, tuple[float, float]] = {
    BudgetTier.budget: (1.0, 0.15),
    BudgetTier.mid_range: (2.0, 0.4),
    BudgetTier.luxury: (5.0, 1.0),
}

LOCAL_HOP_MODES: dict[BudgetTier, LocalMode] = {
    BudgetTier.budget: LocalMode.auto,
    BudgetTier.mid_range: LocalMode.taxi,
    BudgetTier.luxury: LocalMode.private_car,
}

# Per-activity ceilings, tuned in INR and converted for other currencies
ACTIVITY_COST_CAPS_INR: dict[BudgetTier, int] = {
    BudgetTier.budget: 500,
    BudgetTier.mid_range: 2000,
    BudgetTier.luxury: 8000,
}


def currency_multiplier(currency: str) -> float:
    """Units of `currency` per USD; unknown currencies are treated as USD."""
    return CURRENCY_MULTIPLIERS.get(currency.upper(), 1)


def to_currency(amount_usd: float, currency: str) -> int:
    """Convert a USD base cost into whole units of `currency`."""
    return round(amount_usd * currency_multiplier(currency))


def activity_cost_cap(tier: BudgetTier, currency: str) -> int:
    """Per-activity cost ceiling for a tier in the trip currency."""
    inr_cap = ACTIVITY_COST_CAPS_INR[tier]
    if currency.upper() == "INR":
        return inr_cap
    converted = inr_cap * currency_multiplier(currency) / CURRENCY_MULTIPLIERS["INR"]
    return max(1, round(converted))
