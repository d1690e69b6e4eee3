"""Read-only emission factor table, built once per process.

Lookup rules:
1. Category and subcategory are matched case-insensitively.
2. A subcategory mapped to a fuel table (nested car) resolves to the
   default fuel.
3. Anything unknown resolves to no factor, which callers treat as 0.

Overrides: a YAML file of {category: {subcategory: factor}} merged on top
of the variant defaults. Priority: YAML file > variant default.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

import yaml

from ecotrack.factors.config import (
    DEFAULT_CAR_FUEL,
    FactorEntry,
    FactorVariant,
    default_factors,
)
from ecotrack.observability import FactorTableLoaded, emit, get_logger


class EmissionFactorTable:
    """Immutable {category: {subcategory: factor}} lookup."""

    def __init__(
        self,
        factors: Mapping[str, Mapping[str, FactorEntry]],
        variant: FactorVariant = FactorVariant.NESTED,
    ) -> None:
        frozen: dict[str, Mapping[str, FactorEntry]] = {}
        for category, entries in factors.items():
            frozen[category.lower()] = MappingProxyType(
                {
                    sub.lower(): MappingProxyType(dict(v)) if isinstance(v, Mapping) else v
                    for sub, v in entries.items()
                }
            )
        self._factors: Mapping[str, Mapping[str, FactorEntry]] = MappingProxyType(frozen)
        self.variant = variant

    def lookup(self, category: str, subcategory: str) -> float | None:
        """Return the factor for a pair, or None if either key is unknown."""
        entries = self._factors.get(str(category).lower())
        if entries is None:
            return None
        entry = entries.get(str(subcategory).lower())
        if entry is None:
            return None
        if isinstance(entry, Mapping):
            return entry.get(DEFAULT_CAR_FUEL)
        return entry

    def factor(self, category: str, subcategory: str) -> float:
        """Factor for a pair; unknown pairs contribute 0."""
        value = self.lookup(category, subcategory)
        return 0.0 if value is None else value

    def categories(self) -> list[str]:
        return list(self._factors)

    def subcategories(self, category: str) -> dict[str, FactorEntry]:
        return dict(self._factors.get(category.lower(), {}))

    def __contains__(self, key: object) -> bool:
        if isinstance(key, tuple) and len(key) == 2:
            return self.lookup(*key) is not None
        return False

    def __iter__(self) -> Iterator[tuple[str, str, FactorEntry]]:
        for category, entries in self._factors.items():
            for sub, entry in entries.items():
                yield category, sub, entry

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._factors.values())


def _check_factor(where: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Invalid emission factor at {where}: {value!r}. Expected a number.")
    val = float(value)
    if not math.isfinite(val) or val < 0:
        raise ValueError(f"Invalid emission factor at {where}: {val}. Must be finite and >= 0.")
    return val


def load_overrides(path: Path) -> dict[str, dict[str, FactorEntry]]:
    """Parse a YAML factor override file.

    Raises ValueError on structurally invalid documents or bad numbers.
    A missing or empty file yields no overrides.
    """
    if not path.exists():
        return {}
    raw = yaml.safe_load(path.read_text()) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Factor file {path} must contain a mapping of categories.")

    overrides: dict[str, dict[str, FactorEntry]] = {}
    for category, entries in raw.items():
        if not isinstance(entries, dict):
            raise ValueError(f"Factor file {path}: category {category!r} must map subcategories.")
        parsed: dict[str, FactorEntry] = {}
        for sub, value in entries.items():
            where = f"{category}.{sub}"
            if isinstance(value, dict):
                parsed[str(sub).lower()] = {
                    str(k).lower(): _check_factor(f"{where}.{k}", v) for k, v in value.items()
                }
            else:
                parsed[str(sub).lower()] = _check_factor(where, value)
        overrides[str(category).lower()] = parsed
    return overrides


def build_factor_table(
    variant: FactorVariant | str = FactorVariant.NESTED,
    path: Path | None = None,
) -> EmissionFactorTable:
    """Build a table for a variant, merging YAML overrides from path if given."""
    variant = FactorVariant(variant)
    factors = default_factors(variant)
    if path is not None:
        for category, entries in load_overrides(path).items():
            target = factors.setdefault(category, {})
            for sub, entry in entries.items():
                current = target.get(sub)
                # Fuel tables merge per fuel
                if isinstance(current, dict) and isinstance(entry, dict):
                    current.update(entry)
                else:
                    target[sub] = entry

    table = EmissionFactorTable(factors, variant=variant)
    emit(
        FactorTableLoaded(
            variant=variant.value,
            source_path=str(path) if path else None,
            category_count=len(table.categories()),
            factor_count=len(table),
        )
    )
    get_logger(__name__).debug("factors.loaded", variant=variant.value, factor_count=len(table))
    return table


# Singleton
_table: EmissionFactorTable | None = None


def get_factor_table() -> EmissionFactorTable:
    """Get the process-wide table, built from EcotrackConfig on first use."""
    global _table
    if _table is None:
        from ecotrack.config import get_config

        cfg = get_config()
        _table = build_factor_table(cfg.factor_variant, cfg.factors_path)
    return _table


def reset_factor_table() -> None:
    """Reset for testing."""
    global _table
    _table = None
