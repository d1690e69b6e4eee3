"""Structured logging for ecotrack.

A log setup is a pair chosen by name from ObservabilityConfig:

    formatter    structlog (default) | stdlib
    destination  stderr (default)    | jsonl

setup_logging() builds both, hands the formatter's logging.Formatter to the
destination's handler and installs that handler on the root logger. Only the
handler ecotrack installed is ever replaced or removed, so handlers added by
other code (pytest's caplog, an embedding application) are left alone.

Loggers from get_logger() take an event name plus keyword fields in every
mode, including before setup:

    get_logger(__name__).info("factors.loaded", variant="nested")

Extra formatters or destinations can be registered by name before
configure() is called.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ecotrack.observability.config import ObservabilityConfig

_MANAGED = "_ecotrack_managed"


@runtime_checkable
class LogFormatter(Protocol):
    def setup(self, config: ObservabilityConfig) -> logging.Formatter: ...

    def get_logger(self, name: str, **kwargs: Any) -> Any: ...


@runtime_checkable
class LogDestination(Protocol):
    def create_handler(self, formatter: logging.Formatter) -> logging.Handler: ...

    def shutdown(self) -> None: ...


# --- formatters ------------------------------------------------------------


class StructlogFormatter:
    """structlog processors rendered through a stdlib handler.

    structlog loggers and plain logging.getLogger() loggers end up in the
    same output with the same renderer.
    """

    def setup(self, config: ObservabilityConfig) -> logging.Formatter:
        import structlog

        if config.log_format == "console":
            renderer: Any = structlog.dev.ConsoleRenderer()
        else:
            renderer = structlog.processors.JSONRenderer()

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        return structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        import structlog

        return structlog.get_logger(name, **kwargs)


class StdlibFormatter:
    """Plain logging, one JSON object per line (or text with log_format=console)."""

    def setup(self, config: ObservabilityConfig) -> logging.Formatter:
        if config.log_format == "console":
            return logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        return _JsonLineFormatter()

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        return _FieldLogger(logging.getLogger(name))


class _JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **getattr(record, "fields", {}),
        }
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


class _FieldLogger:
    """stdlib logger taking ``event, **fields`` like a structlog logger."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def _log(self, level: int, event: str, fields: dict[str, Any]) -> None:
        self._logger.log(level, event, extra={"fields": fields})

    def debug(self, event: str, **fields: Any) -> None:
        self._log(logging.DEBUG, event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._log(logging.INFO, event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._log(logging.WARNING, event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._log(logging.ERROR, event, fields)


# --- destinations ----------------------------------------------------------


class StderrDestination:
    def __init__(self, config: ObservabilityConfig | None = None) -> None:
        pass

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        return handler

    def shutdown(self) -> None:
        pass


class JsonlFileDestination:
    """Append to ``config.jsonl_path`` (default ./ecotrack.jsonl)."""

    def __init__(self, config: ObservabilityConfig) -> None:
        self._path = Path(config.jsonl_path or "ecotrack.jsonl")
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handler: logging.Handler | None = None

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        self._handler = logging.FileHandler(self._path, mode="a", encoding="utf-8")
        self._handler.setFormatter(formatter)
        return self._handler

    def shutdown(self) -> None:
        if self._handler is not None:
            self._handler.close()
            self._handler = None


_FORMATTERS: dict[str, type] = {"structlog": StructlogFormatter, "stdlib": StdlibFormatter}
_DESTINATIONS: dict[str, type] = {"stderr": StderrDestination, "jsonl": JsonlFileDestination}


def register_formatter(name: str, cls: type) -> None:
    """Make a LogFormatter class selectable as ``log_formatter=name``."""
    _FORMATTERS[name] = cls


def register_destination(name: str, cls: type) -> None:
    """Make a LogDestination class selectable as ``log_destination=name``.

    The class is constructed with the ObservabilityConfig.
    """
    _DESTINATIONS[name] = cls


# --- setup -----------------------------------------------------------------

_formatter: LogFormatter | None = None
_destination: LogDestination | None = None


def _lookup(registry: dict[str, type], kind: str, name: str) -> type:
    try:
        return registry[name]
    except KeyError:
        raise ValueError(
            f"Unknown log {kind}: {name!r}. Available: {sorted(registry)}."
        ) from None


def _detach_managed(root: logging.Logger) -> None:
    for handler in [h for h in root.handlers if getattr(h, _MANAGED, False)]:
        root.removeHandler(handler)


def setup_logging(config: ObservabilityConfig) -> None:
    """Install the configured formatter × destination on the root logger."""
    global _formatter, _destination

    formatter = _lookup(_FORMATTERS, "formatter", config.log_formatter)()
    destination = _lookup(_DESTINATIONS, "destination", config.log_destination)(config)

    handler = destination.create_handler(formatter.setup(config))
    setattr(handler, _MANAGED, True)

    if _destination is not None:
        _destination.shutdown()
    root = logging.getLogger()
    _detach_managed(root)
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.log_level.upper(), logging.WARNING))

    _formatter, _destination = formatter, destination


def get_logger(name: str = "", **kwargs: Any) -> Any:
    """Logger from the active formatter, or a stdlib field logger before setup."""
    if _formatter is None:
        return _FieldLogger(logging.getLogger(name))
    return _formatter.get_logger(name, **kwargs)


def shutdown_logging() -> None:
    """Close the active destination and remove the handler setup_logging() added."""
    global _formatter, _destination
    if _destination is not None:
        _destination.shutdown()
    _detach_managed(logging.getLogger())
    _formatter, _destination = None, None
