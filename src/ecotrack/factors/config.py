"""Default emission factors, in kg CO2 per unit.

Implicit units per category:
- transport: km (car: litres of fuel, electric car: kWh)
- electricity: kWh
- food, waste: kg
- shopping: item

Two factor sets exist. They agree everywhere except how a car is resolved:

- nested: transport.car is a fuel table; a car lookup uses gasoline.
- flat: transport.car is a single gasoline-equivalent factor.
"""

from __future__ import annotations

from enum import Enum


class FactorVariant(str, Enum):
    """Which emission factor set to resolve lookups against."""

    NESTED = "nested"
    FLAT = "flat"


DEFAULT_CAR_FUEL = "gasoline"

CAR_FUEL_FACTORS: dict[str, float] = {
    "gasoline": 2.31,  # per litre
    "diesel": 2.68,  # per litre
    "electric": 0.12,  # per kWh
    "hybrid": 1.5,  # per litre, average
}

_TRANSPORT: dict[str, float] = {
    "bus": 0.105,
    "train": 0.041,
    "plane": 0.255,
    "motorcycle": 0.103,
    "bicycle": 0.0,
    "walking": 0.0,
}

_SHARED: dict[str, dict[str, float]] = {
    "electricity": {
        "grid": 0.5,  # average grid mix
        "solar": 0.05,  # manufacturing
        "wind": 0.01,  # manufacturing
    },
    "food": {
        "beef": 13.3,
        "pork": 4.6,
        "chicken": 2.9,
        "fish": 3.0,
        "dairy": 1.4,
        "eggs": 1.4,
        "vegetables": 0.2,
        "fruits": 0.3,
        "grains": 0.5,
        "processed": 2.5,
    },
    "waste": {
        "plastic": 2.5,
        "paper": 0.8,
        "glass": 0.5,
        "metal": 1.5,
        "organic": 0.3,
    },
    "shopping": {
        "clothing": 23.0,
        "electronics": 400.0,
        "furniture": 50.0,
        "books": 2.5,
    },
}


FactorEntry = float | dict[str, float]


def default_factors(
    variant: FactorVariant = FactorVariant.NESTED,
) -> dict[str, dict[str, FactorEntry]]:
    """Build a fresh {category: {subcategory: factor}} mapping for a variant.

    In the nested variant transport.car maps to the fuel table instead of
    a number.
    """
    transport: dict[str, FactorEntry] = dict(_TRANSPORT)
    if variant == FactorVariant.NESTED:
        transport["car"] = dict(CAR_FUEL_FACTORS)
    else:
        transport["car"] = 2.31
    factors: dict[str, dict[str, FactorEntry]] = {"transport": transport}
    factors.update({category: dict(values) for category, values in _SHARED.items()})
    return factors
