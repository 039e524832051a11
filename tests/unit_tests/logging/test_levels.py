from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from logbridge.config.logging import LogLevel
from logbridge.logging import Level, LevelRangeFilter, LogRecord


def record_at(level: Level) -> LogRecord:
    return LogRecord(timestamp=datetime.now(timezone.utc), level=level, message="m")


class TestLevelParse:
    def test_ordering(self):
        assert Level.ALL < Level.DEBUG < Level.INFO < Level.WARN < Level.ERROR < Level.FATAL < Level.OFF

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("debug", Level.DEBUG),
            ("INFO", Level.INFO),
            ("warn", Level.WARN),
            ("warning", Level.WARN),
            ("critical", Level.FATAL),
            ("fatal", Level.FATAL),
            ("exception", Level.ERROR),
            (" error ", Level.ERROR),
            ("notset", Level.ALL),
            (LogLevel.DEBUG, Level.DEBUG),
            (Level.ERROR, Level.ERROR),
        ],
    )
    def test_names_and_aliases(self, raw, expected):
        assert Level.parse(raw) is expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (logging.DEBUG, Level.DEBUG),
            (logging.WARNING, Level.WARN),
            (logging.CRITICAL, Level.FATAL),
            (25, Level.INFO),
            (5, Level.ALL),
        ],
    )
    def test_stdlib_integers(self, raw, expected):
        assert Level.parse(raw) is expected

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            Level.parse("loud")


class TestLevelRangeFilter:
    def test_inclusive_bounds(self):
        f = LevelRangeFilter(Level.INFO, Level.ERROR)
        assert not f.decide(record_at(Level.DEBUG))
        assert f.decide(record_at(Level.INFO))
        assert f.decide(record_at(Level.WARN))
        assert f.decide(record_at(Level.ERROR))
        assert not f.decide(record_at(Level.FATAL))

    def test_accept_on_match_false_inverts(self):
        f = LevelRangeFilter(Level.DEBUG, Level.DEBUG, accept_on_match=False)
        assert not f.decide(record_at(Level.DEBUG))
        assert f.decide(record_at(Level.INFO))

    def test_min_above_max_rejected(self):
        with pytest.raises(ValueError):
            LevelRangeFilter(Level.ERROR, Level.DEBUG)

    def test_equality(self):
        assert LevelRangeFilter(Level.DEBUG, Level.FATAL) == LevelRangeFilter("debug", "critical")
        assert LevelRangeFilter(Level.DEBUG, Level.FATAL) != LevelRangeFilter(Level.ERROR, Level.FATAL)


class TestLogRecord:
    def test_from_event_dict(self):
        ts = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        record = LogRecord.from_event_dict(
            {
                "timestamp": ts,
                "level": "warning",
                "logger": "app.db",
                "message": "slow query",
                "elapsed_ms": 1200,
            }
        )
        assert record.timestamp == ts
        assert record.level is Level.WARN
        assert record.logger_name == "app.db"
        assert record.message == "slow query"
        assert dict(record.extra) == {"elapsed_ms": 1200}
        assert record.error is None

    def test_iso_timestamp_string(self):
        record = LogRecord.from_event_dict({"timestamp": "2024-01-02T03:04:05Z", "level": "info", "event": "x"})
        assert record.timestamp == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert record.message == "x"

    def test_exc_info_instance_becomes_error(self):
        err = KeyError("missing")
        record = LogRecord.from_event_dict({"level": "error", "message": "m", "exc_info": err})
        assert record.error is err

    def test_exc_info_tuple_becomes_error(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError as exc:
            import sys

            record = LogRecord.from_event_dict({"level": "error", "message": "m", "exc_info": sys.exc_info()})
            assert record.error is exc

    def test_extra_is_read_only(self):
        record = LogRecord.from_event_dict({"level": "info", "message": "m", "k": 1})
        with pytest.raises(TypeError):
            record.extra["k"] = 2  # type: ignore[index]

    def test_to_event_dict_renders_traceback(self):
        try:
            raise ValueError("bad value")
        except ValueError as exc:
            record = LogRecord(
                timestamp=datetime.now(timezone.utc), level=Level.ERROR, message="failed", error=exc
            )
        d = record.to_event_dict()
        assert d["level"] == "ERROR"
        assert d["message"] == "failed"
        assert "ValueError: bad value" in d["exception"]
