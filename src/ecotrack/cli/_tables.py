"""Factor table selection for CLI commands."""

from __future__ import annotations

from ecotrack.config import get_config
from ecotrack.factors import EmissionFactorTable, build_factor_table, get_factor_table


def active_table(variant: str | None = None) -> EmissionFactorTable:
    """The configured table, or one built for an explicit --variant."""
    if variant is None:
        return get_factor_table()
    return build_factor_table(variant.lower(), get_config().factors_path)
