"""Process-wide event emitter.

Library code only calls emit(). Until configure() runs, emit() does
nothing, so the core functions stay usable without any observability
setup (tests, library embedding).
"""

from __future__ import annotations

from typing import Any

from pyventus.core.processing.asyncio import AsyncIOProcessingService
from pyventus.events import EventEmitter

from ecotrack.observability.config import ObservabilityConfig
from ecotrack.observability.linker import EcotrackEventLinker
from ecotrack.observability.logging import setup_logging, shutdown_logging

_emitter: EventEmitter | None = None


def emit(event: Any) -> None:
    """Dispatch an event to the registered subscribers, if configured."""
    if _emitter is not None:
        _emitter.emit(event)


def configure(config: ObservabilityConfig | None = None) -> EventEmitter:
    """Set up logging and subscribers, then create the emitter.

    Safe to call repeatedly: later calls return the first emitter and
    ignore their config.
    """
    global _emitter
    if _emitter is not None:
        return _emitter

    cfg = config or ObservabilityConfig()
    setup_logging(cfg)

    from ecotrack.observability.subscribers.structlog_sub import register_structlog_subscriber

    register_structlog_subscriber()

    # The jsonl log destination already writes to jsonl_path
    if cfg.jsonl_path and cfg.log_destination != "jsonl":
        from ecotrack.observability.subscribers.jsonl import register_jsonl_subscriber

        register_jsonl_subscriber(cfg.jsonl_path)

    _emitter = EventEmitter(
        event_linker=EcotrackEventLinker,
        event_processor=AsyncIOProcessingService(),
    )
    return _emitter


def is_configured() -> bool:
    return _emitter is not None


def reset() -> None:
    """Drop the emitter, all subscribers and the installed log handler."""
    global _emitter
    shutdown_logging()
    EcotrackEventLinker.remove_all()
    _emitter = None
