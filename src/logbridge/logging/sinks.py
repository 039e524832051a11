"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Literal

import orjson

from logbridge.exceptions import InvalidSinkName

from .formatters import ConsoleFormatter
from .levels import Level, LevelRangeFilter
from .records import LogRecord

LogFormat = Literal["console", "json"]

FILE_SINK_NAME = "file"


def orjson_dumps(v: Any, *, default: Any = None) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks.

    A sink accepts a record when the record's level reaches ``threshold`` and
    every filter in its chain agrees. Subclasses only implement ``append``.
    """

    def __init__(self, name: str, threshold: Level = Level.ALL):
        if not isinstance(name, str) or not name.strip():
            raise InvalidSinkName(name)
        self.name = name
        self.threshold = Level.parse(threshold)
        self._filters: list[LevelRangeFilter] = []
        self._filters_lock = threading.Lock()
        self._local = threading.local()

    @property
    def filters(self) -> tuple[LevelRangeFilter, ...]:
        return tuple(self._filters)

    def add_filter(self, level_filter: LevelRangeFilter) -> None:
        with self._filters_lock:
            self._filters = [*self._filters, level_filter]

    def clear_filters(self) -> None:
        with self._filters_lock:
            self._filters = []

    def accepts(self, record: LogRecord) -> bool:
        if record.level < self.threshold:
            return False
        return all(f.decide(record) for f in self._filters)

    def emit(self, record: LogRecord) -> None:
        """Run the record through threshold and filters, then append it.

        A record logged while this sink is already appending on the same
        thread is dropped.
        """
        if getattr(self._local, "appending", False):
            return
        if not self.accepts(record):
            return
        self._local.appending = True
        try:
            self.append(record)
        finally:
            self._local.appending = False

    @abstractmethod
    def append(self, record: LogRecord) -> None:
        """Write an accepted record to the sink's destination."""
        ...

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, threshold={self.threshold.name})"


class StdioSink(BaseSink):
    """Standard I/O sink with configurable format.

    Args:
        name: Registry name of the sink
        fmt: Output format - "console" (colored human-readable) or "json"
        stream: Output stream (default: stderr)
    """

    def __init__(self, name: str = "console", fmt: LogFormat = "console", stream: Any = None, **kwargs: Any):
        super().__init__(name, **kwargs)
        self._fmt = fmt
        self._stream = stream or sys.stderr

    def append(self, record: LogRecord) -> None:
        event_dict = record.to_event_dict()
        if self._fmt == "json":
            output = orjson_dumps(event_dict, default=str)
        else:
            use_color = bool(getattr(self._stream, "isatty", lambda: False)())
            output = ConsoleFormatter.format(event_dict, use_color=use_color)

        self._stream.write(output + "\n")
        self._stream.flush()

    def flush(self) -> None:
        self._stream.flush()


class FileSink(BaseSink):
    """Local file sink with rotation (JSON format)."""

    def __init__(
        self,
        path: str | Path,
        name: str = FILE_SINK_NAME,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        **kwargs: Any,
    ):
        super().__init__(name, **kwargs)
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._max_bytes = max_bytes
        self._backup_count = backup_count
        self._lock = threading.Lock()
        self._file = open(self._path, "a", encoding="utf-8")

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: LogRecord) -> None:
        json_str = orjson_dumps(record.to_event_dict(), default=str)
        with self._lock:
            if self._file.closed:
                return
            self._file.write(json_str + "\n")
            self._file.flush()
            self._maybe_rotate()

    def _maybe_rotate(self) -> None:
        if self._max_bytes <= 0 or self._path.stat().st_size <= self._max_bytes:
            return
        self._file.close()
        if self._backup_count > 0:
            for i in range(self._backup_count - 1, 0, -1):
                src = self._path.with_suffix(f".{i}.log")
                if src.exists():
                    src.replace(self._path.with_suffix(f".{i + 1}.log"))
            self._path.replace(self._path.with_suffix(".1.log"))
            self._file = open(self._path, "a", encoding="utf-8")
        else:
            self._file = open(self._path, "w", encoding="utf-8")

    def flush(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.flush()

    def close(self) -> None:
        with self._lock:
            self._file.close()


# =============================================================================
# Event Bridge
# =============================================================================

RecordObserver = Callable[["EventSink", LogRecord], None]


class EventSink(BaseSink):
    """Sink that turns every accepted record into an in-process notification.

    Observers are called synchronously on the logging thread, in the order
    they subscribed, before the log call returns. Subscribing the same
    observer twice delivers each record to it twice.
    """

    def __init__(self, name: str):
        super().__init__(name, threshold=Level.DEBUG)
        self.add_filter(LevelRangeFilter(Level.DEBUG, Level.FATAL))
        self._observers: list[RecordObserver] = []
        self._observers_lock = threading.Lock()

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def subscribe(self, observer: RecordObserver) -> None:
        with self._observers_lock:
            self._observers.append(observer)

    def unsubscribe(self, observer: RecordObserver) -> None:
        """Detach the most recent subscription of ``observer``; no-op if absent."""
        with self._observers_lock:
            for i in range(len(self._observers) - 1, -1, -1):
                if self._observers[i] == observer:
                    del self._observers[i]
                    return

    def append(self, record: LogRecord) -> None:
        with self._observers_lock:
            observers = tuple(self._observers)
        for observer in observers:
            observer(self, record)
