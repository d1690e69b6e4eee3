"""Tests for the observability layer: events, emitter, logging, event log.

Coverage:
- Events: frozen immutability, serialization
- Emitter: emit no-op when unconfigured, configure idempotency, reset
- Logging: formatter × destination composition, get_logger pre/post config
- Integration: core operations run with the emitter configured
"""

from __future__ import annotations

import json
import logging
from dataclasses import FrozenInstanceError, asdict

import pytest
from conftest import NOW, make_record

from ecotrack.observability import (
    FactorTableLoaded,
    FootprintCalculated,
    LeaderboardRanked,
    ObservabilityConfig,
    StatsRecomputed,
    UnknownEmissionFactor,
)


@pytest.fixture()
def configured():
    """Configure observability with stderr + structlog defaults."""
    from ecotrack.observability.emitter import configure

    cfg = ObservabilityConfig(
        log_formatter="structlog",
        log_destination="stderr",
        log_level="DEBUG",
        log_format="json",
    )
    return configure(cfg)


ALL_EVENTS = [
    FactorTableLoaded("nested", None, 5, 27),
    FootprintCalculated("food", "beef", 2.0, "kg", 13.3, 26.6),
    UnknownEmissionFactor("food", "unicorn"),
    StatsRecomputed(3, 42.0, 7.0, 30.0, "2024-03-31T12:00:00+00:00"),
    LeaderboardRanked(4, 1),
]


class TestEvents:
    @pytest.mark.parametrize("event", ALL_EVENTS, ids=lambda e: type(e).__name__)
    def test_frozen(self, event):
        with pytest.raises(FrozenInstanceError):
            event.category = "x"  # type: ignore[attr-defined]

    @pytest.mark.parametrize("event", ALL_EVENTS, ids=lambda e: type(e).__name__)
    def test_serializable(self, event):
        assert json.loads(json.dumps(asdict(event))) == asdict(event)

    def test_fields(self):
        event = FootprintCalculated("food", "beef", 2.0, "kg", 13.3, 26.6)
        assert event.factor == 13.3
        assert event.unit == "kg"


class TestEmitter:
    """emit() is no-op when not configured, works after configure()."""

    def test_emit_noop_when_not_configured(self):
        from ecotrack.observability.emitter import emit

        # Should not raise
        emit(UnknownEmissionFactor("food", "unicorn"))

    def test_configure_returns_emitter(self, configured):
        from pyventus.events import EventEmitter

        assert isinstance(configured, EventEmitter)

    def test_configure_idempotent(self):
        from ecotrack.observability.emitter import configure

        cfg = ObservabilityConfig(log_destination="stderr")
        e1 = configure(cfg)
        e2 = configure(cfg)
        assert e1 is e2

    def test_is_configured(self):
        from ecotrack.observability.emitter import configure, is_configured

        assert not is_configured()
        configure(ObservabilityConfig(log_destination="stderr"))
        assert is_configured()

    def test_reset_clears_state(self, configured):
        from ecotrack.observability.emitter import is_configured, reset

        assert is_configured()
        reset()
        assert not is_configured()

    def test_reset_detaches_handler(self, configured):
        from ecotrack.observability.emitter import reset

        reset()
        handlers = logging.getLogger().handlers
        managed = [h for h in handlers if getattr(h, "_ecotrack_managed", False)]
        assert managed == []

    def test_emit_after_configure(self, configured):
        from ecotrack.observability.emitter import emit

        for event in ALL_EVENTS:
            emit(event)


class TestLogging:
    """LogFormatter × LogDestination composition."""

    def test_structlog_formatter_setup(self):
        from ecotrack.observability.logging import StructlogFormatter

        result = StructlogFormatter().setup(ObservabilityConfig(log_format="json"))
        assert isinstance(result, logging.Formatter)

    def test_structlog_console_renderer(self):
        from ecotrack.observability.logging import StructlogFormatter

        result = StructlogFormatter().setup(ObservabilityConfig(log_format="console"))
        assert isinstance(result, logging.Formatter)

    def test_stdlib_formatter_setup(self):
        from ecotrack.observability.logging import StdlibFormatter

        result = StdlibFormatter().setup(ObservabilityConfig(log_format="json"))
        assert isinstance(result, logging.Formatter)

    def test_get_logger_before_config(self):
        """get_logger() accepts structured kwargs even before setup."""
        from ecotrack.observability.logging import get_logger

        lg = get_logger("test")
        lg.info("test.event", answer=42)

    def test_get_logger_after_config(self, configured):
        from ecotrack.observability.logging import get_logger

        lg = get_logger("test")
        assert hasattr(lg, "info")
        assert hasattr(lg, "debug")
        assert hasattr(lg, "warning")

    def test_stderr_destination(self):
        from ecotrack.observability.logging import StderrDestination

        dest = StderrDestination()
        handler = dest.create_handler(logging.Formatter())
        assert isinstance(handler, logging.StreamHandler)
        dest.shutdown()

    def test_jsonl_file_destination(self, tmp_path):
        from ecotrack.observability.logging import JsonlFileDestination

        cfg = ObservabilityConfig(jsonl_path=str(tmp_path / "logs" / "test.jsonl"))
        dest = JsonlFileDestination(cfg)
        handler = dest.create_handler(logging.Formatter("%(message)s"))
        assert isinstance(handler, logging.FileHandler)
        assert (tmp_path / "logs").is_dir()
        dest.shutdown()

    def test_stdlib_json_to_file(self, tmp_path):
        from ecotrack.observability.logging import get_logger, setup_logging, shutdown_logging

        path = tmp_path / "app.jsonl"
        setup_logging(
            ObservabilityConfig(
                log_formatter="stdlib",
                log_destination="jsonl",
                log_level="INFO",
                jsonl_path=str(path),
            )
        )
        get_logger("ecotrack.test").info("footprint.calculated", footprint=26.6)
        shutdown_logging()

        line = json.loads(path.read_text().strip().splitlines()[-1])
        assert line["event"] == "footprint.calculated"
        assert line["footprint"] == 26.6

    def test_second_setup_closes_previous_file(self, tmp_path):
        from ecotrack.observability import logging as obs_logging

        path = str(tmp_path / "a.jsonl")
        obs_logging.setup_logging(ObservabilityConfig(log_destination="jsonl", jsonl_path=path))
        previous = obs_logging._destination
        obs_logging.setup_logging(ObservabilityConfig(log_destination="stderr"))
        obs_logging.shutdown_logging()

        assert previous._handler is None

    def test_register_custom_formatter(self):
        from ecotrack.observability.logging import _FORMATTERS, register_formatter

        class CustomFormatter:
            def setup(self, config):
                return logging.Formatter()

            def get_logger(self, name, **kwargs):
                return logging.getLogger(name)

        register_formatter("custom", CustomFormatter)
        assert "custom" in _FORMATTERS
        del _FORMATTERS["custom"]

    def test_register_custom_destination(self):
        from ecotrack.observability.logging import _DESTINATIONS, register_destination

        class CustomDest:
            def __init__(self, config):
                self.config = config

            def create_handler(self, formatter):
                return logging.StreamHandler()

            def shutdown(self):
                pass

        register_destination("custom", CustomDest)
        assert "custom" in _DESTINATIONS
        del _DESTINATIONS["custom"]

    def test_setup_unknown_formatter_raises(self):
        from ecotrack.observability.logging import setup_logging

        with pytest.raises(ValueError, match="Unknown log formatter"):
            setup_logging(ObservabilityConfig(log_formatter="nonexistent"))

    def test_setup_unknown_destination_raises(self):
        from ecotrack.observability.logging import setup_logging

        with pytest.raises(ValueError, match="Unknown log destination"):
            setup_logging(ObservabilityConfig(log_destination="nonexistent"))


class TestConfig:
    """ObservabilityConfig env-var driven defaults."""

    def test_default_values(self):
        cfg = ObservabilityConfig()
        assert cfg.log_formatter == "structlog"
        assert cfg.log_destination == "stderr"
        assert cfg.log_level == "WARNING"
        assert cfg.log_format == "json"
        assert cfg.jsonl_path is None

    def test_env_values(self, monkeypatch):
        monkeypatch.setenv("ECOTRACK_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("ECOTRACK_LOG_PATH", "/tmp/ecotrack.jsonl")
        cfg = ObservabilityConfig()
        assert cfg.log_level == "DEBUG"
        assert cfg.jsonl_path == "/tmp/ecotrack.jsonl"


class TestEventLog:
    def test_jsonl_sink_writes(self, tmp_path):
        from ecotrack.observability.subscribers.jsonl import JsonlSink

        path = tmp_path / "events" / "events.jsonl"
        sink = JsonlSink(path)
        sink.write({"event": "LeaderboardRanked", "entry_count": 4})
        sink.write({"event": "LeaderboardRanked", "entry_count": 2})

        lines = [json.loads(line) for line in path.read_text().splitlines()]
        assert [line["entry_count"] for line in lines] == [4, 2]

    def test_register_returns_sink(self, tmp_path):
        from ecotrack.observability.subscribers.jsonl import register_jsonl_subscriber

        sink = register_jsonl_subscriber(str(tmp_path / "events.jsonl"))
        assert sink.path == tmp_path / "events.jsonl"


class TestLinker:
    def test_linker_is_event_linker(self):
        from pyventus.events import EventLinker

        from ecotrack.observability.linker import EcotrackEventLinker

        assert issubclass(EcotrackEventLinker, EventLinker)


class TestIntegration:
    """Core operations behave the same with the emitter configured."""

    def test_calculate_with_jsonl_subscriber(self, tmp_path):
        from ecotrack.calculator import calculate_footprint
        from ecotrack.factors import build_factor_table
        from ecotrack.observability.emitter import configure

        configure(ObservabilityConfig(jsonl_path=str(tmp_path / "events.jsonl")))
        table = build_factor_table()
        assert calculate_footprint("food", "beef", 2, table=table) == pytest.approx(26.6)
        assert calculate_footprint("food", "unicorn", 2, table=table) == 0.0

    def test_aggregate_and_rank(self, configured):
        from ecotrack.aggregate import recompute_stats
        from ecotrack.core.models import UserProjection
        from ecotrack.leaderboard import rank_leaderboard

        stats = recompute_stats([make_record(14.0, days_ago=2)], NOW)
        entries = rank_leaderboard([UserProjection("a", stats), UserProjection("b")])
        assert [e.username for e in entries] == ["b", "a"]
