"""Footprint calculator for logged activities.

Core functions:
    calculate_footprint(category, subcategory, quantity) -- factor × quantity
    build_record(...) -- compute the footprint and wrap it in an ActivityRecord
    combine_components(...) -- total of a pre-split footprint entry
    round_footprint(value) -- 2-decimal presentation rounding
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from ecotrack.core.models import ActivityRecord, Category
from ecotrack.factors.table import EmissionFactorTable, get_factor_table
from ecotrack.observability import FootprintCalculated, UnknownEmissionFactor, emit


def calculate_footprint(
    category: str | Category,
    subcategory: str,
    quantity: float,
    unit: str | None = None,
    table: EmissionFactorTable | None = None,
) -> float:
    """kg CO2 for an activity: factor(category, subcategory) × quantity.

    The unit is accepted but not converted; factors assume the category's
    implicit unit. Unknown categories or subcategories contribute 0.
    No rounding is applied.
    """
    if table is None:
        table = get_factor_table()

    cat = category.value if isinstance(category, Category) else str(category)
    factor = table.lookup(cat, subcategory)
    if factor is None:
        emit(UnknownEmissionFactor(category=cat, subcategory=subcategory))
        factor = 0.0

    footprint = factor * quantity
    emit(
        FootprintCalculated(
            category=cat,
            subcategory=subcategory,
            quantity=quantity,
            unit=unit,
            factor=factor,
            footprint=footprint,
        )
    )
    return footprint


def build_record(
    category: str | Category,
    subcategory: str,
    quantity: float,
    unit: str,
    timestamp: datetime | None = None,
    table: EmissionFactorTable | None = None,
    **details,
) -> ActivityRecord:
    """Compute the footprint for an activity and return the immutable record.

    Raises ValueError for a category outside the Category enum or a negative
    quantity; those are malformed input, not unknown factors.
    """
    cat = Category.parse(category)
    if cat is None:
        raise ValueError(f"Invalid category: {category!r}")
    if quantity < 0:
        raise ValueError(f"Quantity must be >= 0, got {quantity}")

    footprint = calculate_footprint(cat, subcategory, quantity, unit, table=table)
    tags = details.get("tags") or ()
    if isinstance(tags, str):
        tags = (tags,)
    return ActivityRecord(
        category=cat,
        subcategory=subcategory,
        quantity=quantity,
        unit=unit,
        footprint=footprint,
        timestamp=timestamp or datetime.now(UTC),
        activity=details.get("activity", ""),
        location=details.get("location"),
        notes=details.get("notes"),
        tags=tuple(tags),
    )


def combine_components(
    transportation: float | None = None,
    energy: float | None = None,
    diet: float | None = None,
    other: float | None = None,
) -> float:
    """Total of a footprint entry already split by source. Missing parts count as 0."""
    parts: Iterable[float | None] = (transportation, energy, diet, other)
    return float(sum((p or 0.0) for p in parts))


def round_footprint(value: float) -> float:
    """Presentation rounding to 2 decimals, half away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
