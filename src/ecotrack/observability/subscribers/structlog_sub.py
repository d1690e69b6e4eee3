"""Log every ecotrack event under the ``ecotrack.events`` logger.

Per-calculation events log at debug; an unknown factor is a warning.
"""

from __future__ import annotations

from dataclasses import asdict

from ecotrack.observability.events import (
    FactorTableLoaded,
    FootprintCalculated,
    LeaderboardRanked,
    StatsRecomputed,
    UnknownEmissionFactor,
)
from ecotrack.observability.linker import EcotrackEventLinker
from ecotrack.observability.logging import get_logger


def _log(level: str, name: str, event: object) -> None:
    # Resolved per call: setup_logging() may swap the formatter after registration
    logger = get_logger("ecotrack.events")
    getattr(logger, level)(name, **asdict(event))  # type: ignore[call-overload]


def register_structlog_subscriber() -> None:
    @EcotrackEventLinker.on(FactorTableLoaded)
    def _factors_loaded(event: FactorTableLoaded) -> None:
        _log("info", "factors.loaded", event)

    @EcotrackEventLinker.on(FootprintCalculated)
    def _footprint(event: FootprintCalculated) -> None:
        _log("debug", "footprint.calculated", event)

    @EcotrackEventLinker.on(UnknownEmissionFactor)
    def _unknown_factor(event: UnknownEmissionFactor) -> None:
        _log("warning", "footprint.unknown_factor", event)

    @EcotrackEventLinker.on(StatsRecomputed)
    def _stats(event: StatsRecomputed) -> None:
        _log("info", "stats.recomputed", event)

    @EcotrackEventLinker.on(LeaderboardRanked)
    def _leaderboard(event: LeaderboardRanked) -> None:
        _log("info", "leaderboard.ranked", event)
