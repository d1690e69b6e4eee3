"""Logging and event settings, read from ECOTRACK_LOG_* env vars.

Every setting has a default, so configure() works with no environment:
structlog JSON lines on stderr at WARNING.

    ECOTRACK_LOG_FORMATTER    structlog | stdlib
    ECOTRACK_LOG_DESTINATION  stderr | jsonl
    ECOTRACK_LOG_LEVEL        DEBUG | INFO | WARNING | ...
    ECOTRACK_LOG_FORMAT       json | console
    ECOTRACK_LOG_PATH         JSONL file for the jsonl destination, or for
                              the event log when logging goes to stderr
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env(suffix: str, default: str | None = None):
    return field(default_factory=lambda: os.environ.get(f"ECOTRACK_LOG_{suffix}", default))


@dataclass
class ObservabilityConfig:
    log_formatter: str = _env("FORMATTER", "structlog")
    log_destination: str = _env("DESTINATION", "stderr")
    log_level: str = _env("LEVEL", "WARNING")
    log_format: str = _env("FORMAT", "json")
    jsonl_path: str | None = _env("PATH")
