"""
logbridge: logging helpers around a structlog-based logging context.

- ``EventSink`` lets in-process code subscribe to log records as they happen.
- ``try_add_event_sink``, ``try_configure_logging`` and ``try_set_log_level``
  wire sinks, config files and the file sink level at runtime, returning a
  ``Result`` instead of raising.
- ``get_current_process`` and ``running_process_instance_count`` cover the
  process-table lookups the host application needs.
"""

from .helpers.logging import ConfigSource, try_add_event_sink, try_configure_logging, try_set_log_level
from .helpers.process import get_current_process, running_process_instance_count
from .helpers.result import Result
from .logging import EventSink, Level, LoggingContext, LogRecord

__version__ = "0.1.0"

__all__ = [
    "ConfigSource",
    "EventSink",
    "Level",
    "LogRecord",
    "LoggingContext",
    "Result",
    "get_current_process",
    "running_process_instance_count",
    "try_add_event_sink",
    "try_configure_logging",
    "try_set_log_level",
]
