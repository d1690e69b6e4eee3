"""Event log: every event appended to a JSONL file as ``{"event": <type>, ...fields}``."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from ecotrack.observability.events import (
    FactorTableLoaded,
    FootprintCalculated,
    LeaderboardRanked,
    StatsRecomputed,
    UnknownEmissionFactor,
)
from ecotrack.observability.linker import EcotrackEventLinker

EVENT_TYPES = (
    FactorTableLoaded,
    FootprintCalculated,
    UnknownEmissionFactor,
    StatsRecomputed,
    LeaderboardRanked,
)


class JsonlSink:
    """Appends one JSON object per write; the file is opened per line."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, record: dict) -> None:
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, default=str) + "\n")


def register_jsonl_subscriber(path: str) -> JsonlSink:
    sink = JsonlSink(Path(path))

    @EcotrackEventLinker.on(*EVENT_TYPES)
    def _append(event: object) -> None:
        sink.write({"event": type(event).__name__, **asdict(event)})  # type: ignore[call-overload]

    return sink
