"""
Logging engine for logbridge.

Provides an explicit logging context with multiple sink support:
- stdio: Standard output (console/json format)
- file: Local file rotation with JSON
- event: In-process bridge that notifies subscribed observers

Design Pattern: Strategy Pattern for sink abstraction.
Library: structlog + orjson for high-performance JSON serialization.
"""

from .core import LoggingContext, get_logger
from .levels import Level, LevelRangeFilter
from .records import LogRecord
from .sinks import FILE_SINK_NAME, BaseSink, EventSink, FileSink, RecordObserver, StdioSink

__all__ = [
    "LoggingContext",
    "get_logger",
    "Level",
    "LevelRangeFilter",
    "LogRecord",
    "FILE_SINK_NAME",
    "BaseSink",
    "EventSink",
    "FileSink",
    "RecordObserver",
    "StdioSink",
]
