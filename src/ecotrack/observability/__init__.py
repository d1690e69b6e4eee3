"""ecotrack observability: typed events routed to structured logs.

Public API:
    emit(event)     -- Fire-and-forget event emission (no-op if not configured)
    configure(cfg)  -- Initialize emitter + subscribers (call once at startup)
    reset()         -- Reset for testing

Logging (swappable formatter x destination):
    get_logger(name)           -- Get a structured logger
    register_formatter(n, cls) -- Register custom LogFormatter
    register_destination(n, cls) -- Register custom LogDestination
"""

from ecotrack.observability.config import ObservabilityConfig
from ecotrack.observability.emitter import configure, emit, is_configured, reset
from ecotrack.observability.events import (
    FactorTableLoaded,
    FootprintCalculated,
    LeaderboardRanked,
    StatsRecomputed,
    UnknownEmissionFactor,
)
from ecotrack.observability.logging import (
    LogDestination,
    LogFormatter,
    get_logger,
    register_destination,
    register_formatter,
)

__all__ = [
    # Core API
    "emit",
    "configure",
    "is_configured",
    "reset",
    "ObservabilityConfig",
    # Logging (swappable)
    "get_logger",
    "LogFormatter",
    "LogDestination",
    "register_formatter",
    "register_destination",
    # Events
    "FactorTableLoaded",
    "FootprintCalculated",
    "UnknownEmissionFactor",
    "StatsRecomputed",
    "LeaderboardRanked",
]
