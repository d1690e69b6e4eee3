"""Shared fixtures: isolate every test from user config and process singletons."""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

import pytest

from ecotrack.config import reset_config
from ecotrack.core.models import ActivityRecord, Category
from ecotrack.factors import reset_factor_table
from ecotrack.observability import reset as reset_observability

NOW = datetime(2024, 3, 31, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _isolate(monkeypatch, tmp_path):
    """No ~/.ecotrack/config.yaml, no ECOTRACK_* env, fresh singletons."""
    monkeypatch.setattr("ecotrack.config._DEFAULT_PATH", tmp_path / "missing.yaml")
    for key in list(os.environ):
        if key.startswith("ECOTRACK_"):
            monkeypatch.delenv(key)
    reset_config()
    reset_factor_table()
    reset_observability()
    yield
    reset_observability()
    reset_factor_table()
    reset_config()


def make_record(
    footprint: float,
    days_ago: float = 0.0,
    category: Category = Category.FOOD,
    subcategory: str = "beef",
    now: datetime = NOW,
) -> ActivityRecord:
    """ActivityRecord with a fixed footprint, ``days_ago`` before ``now``."""
    return ActivityRecord(
        category=category,
        subcategory=subcategory,
        quantity=1.0,
        unit="kg",
        footprint=footprint,
        timestamp=now - timedelta(days=days_ago),
    )
