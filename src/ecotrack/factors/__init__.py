"""Emission factors: kg CO2 per unit of activity, keyed by category/subcategory.

Public API:
    get_factor_table() -- process-wide table (variant + overrides from config)
    build_factor_table(variant, path) -- build a table explicitly
    default_factors(variant) -- raw default mapping for a variant
"""

from ecotrack.factors.config import (
    CAR_FUEL_FACTORS,
    DEFAULT_CAR_FUEL,
    FactorVariant,
    default_factors,
)
from ecotrack.factors.table import (
    EmissionFactorTable,
    build_factor_table,
    get_factor_table,
    load_overrides,
    reset_factor_table,
)

__all__ = [
    "CAR_FUEL_FACTORS",
    "DEFAULT_CAR_FUEL",
    "EmissionFactorTable",
    "FactorVariant",
    "build_factor_table",
    "default_factors",
    "get_factor_table",
    "load_overrides",
    "reset_factor_table",
]
