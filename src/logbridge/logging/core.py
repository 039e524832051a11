"""
Core logging context and structlog pipeline.

``LoggingContext`` holds what would otherwise be process-wide engine state:
the sink registry, the root threshold, the configured flag and the optional
config watcher. Every helper takes the context explicitly.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Protocol

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from . import diagnostics
from .levels import Level
from .records import LogRecord
from .sinks import BaseSink, FileSink, StdioSink

if TYPE_CHECKING:
    from logbridge.config.logging import LoggingSettings

    from .interceptors import RedirectStdLibHandler


class Watcher(Protocol):
    def stop(self) -> None: ...


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add a UTC timestamp to the log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc)
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.get("_name", "root")
    event_dict.pop("_name", None)
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message'."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


# Custom logger factory that suppresses empty output (avoids /dev/null overhead)
class NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = NopFile()


class SilentPrintLoggerFactory:
    """Logger factory that returns a logger writing to nowhere."""

    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=_NOP_FILE)


# Level filtering happens in the context's processor chain so the root level
# can change at runtime; the bound logger itself lets everything through.
_BoundLogger = structlog.make_filtering_bound_logger(logging.NOTSET)


# =============================================================================
# Logging Context
# =============================================================================


class LoggingContext:
    """Sink registry plus root threshold, with an explicit lifecycle.

    Usage:
        with LoggingContext() as ctx:
            ctx.initialize(settings.logging)
            log = ctx.get_logger(__name__)
            log.info("started", port=8080)
    """

    def __init__(self, root_level: Level | str = Level.INFO):
        self._root_level = Level.parse(root_level)
        self._sinks: list[BaseSink] = []
        self._lock = threading.RLock()
        self._stdlib_handler: RedirectStdLibHandler | None = None
        self._saved_stdlib_level: int | None = None
        self._watcher: Watcher | None = None
        self._global = False
        self.configured = False

    # -------------------------------------------------------------------------
    # Root level
    # -------------------------------------------------------------------------

    @property
    def root_level(self) -> Level:
        return self._root_level

    @root_level.setter
    def root_level(self, value: Level | str | int) -> None:
        self._root_level = Level.parse(value)
        if self._stdlib_handler is not None:
            logging.getLogger().setLevel(max(int(self._root_level), logging.DEBUG))

    def is_enabled_for(self, level: Level) -> bool:
        return level >= self._root_level

    # -------------------------------------------------------------------------
    # Sink registry
    # -------------------------------------------------------------------------

    @property
    def sinks(self) -> tuple[BaseSink, ...]:
        return tuple(self._sinks)

    def add_sink(self, sink: BaseSink) -> None:
        """Register a sink. Names are not deduplicated."""
        with self._lock:
            self._sinks = [*self._sinks, sink]

    def get_sink(self, name: str) -> BaseSink | None:
        """Return the first registered sink called ``name``."""
        for sink in self._sinks:
            if sink.name == name:
                return sink
        return None

    def remove_sink(self, name: str) -> int:
        """Unregister and close every sink called ``name``; returns how many."""
        with self._lock:
            removed = [s for s in self._sinks if s.name == name]
            self._sinks = [s for s in self._sinks if s.name != name]
        for sink in removed:
            sink.close()
        return len(removed)

    def detach_sinks(self, sinks: list[BaseSink]) -> None:
        """Unregister and close the given sink instances."""
        ids = {id(s) for s in sinks}
        with self._lock:
            self._sinks = [s for s in self._sinks if id(s) not in ids]
        for sink in sinks:
            sink.close()

    def clear_sinks(self) -> None:
        with self._lock:
            removed, self._sinks = self._sinks, []
        for sink in removed:
            sink.close()

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _filter_by_root_level(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if not self.is_enabled_for(Level.parse(event_dict.get("level", method_name))):
            raise structlog.DropEvent
        return event_dict

    def _dispatch(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        """Deliver the record to every sink. Returns empty to suppress default output."""
        record = LogRecord.from_event_dict(event_dict)
        self.handle(record)
        return ""

    def handle(self, record: LogRecord) -> None:
        """Hand a record to each registered sink in registration order."""
        for sink in self._sinks:
            try:
                sink.emit(record)
            except Exception as exc:
                diagnostics.report("sink %r failed to append a record", sink.name, exc=exc)

    def processors(self) -> list[Processor]:
        return [
            structlog.stdlib.add_log_level,
            self._filter_by_root_level,
            add_timestamp,
            add_logger_name,
            rename_event_key,
            structlog.processors.StackInfoRenderer(),
            self._dispatch,
        ]

    def get_logger(self, name: str | None = None) -> Any:
        """Get a structured logger bound to this context."""
        return structlog.wrap_logger(
            structlog.PrintLogger(file=_NOP_FILE),
            processors=self.processors(),
            wrapper_class=_BoundLogger,
            context_class=dict,
            _name=name or "root",
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self, settings: LoggingSettings | None = None, *, install_global: bool = True) -> None:
        """
        Build sinks from settings and start routing records through this context.

        Args:
            settings: Logging settings (defaults to environment-driven settings)
            install_global: Also route ``structlog.get_logger()`` to this context
        """
        from logbridge.config.logging import LoggingSettings

        settings = settings or LoggingSettings()

        # 1. Initialize Sinks
        self.clear_sinks()
        for sink in _build_sinks(settings):
            self.add_sink(sink)

        # 2. Console layout
        from .formatters import ConsoleFormatter

        ConsoleFormatter.configure(
            timestamp_format=settings.console_timestamp_format,
            level_width=settings.console_level_width,
            logger_width=settings.console_logger_width,
            separator=settings.console_separator,
        )

        # 3. Configure Structlog
        if install_global:
            self.install_global()

        # 4. Configure Stdlib Logging (Root)
        if settings.intercept_stdlib:
            self.install_stdlib_handler()

        self.root_level = settings.level
        self.configured = True

    def install_global(self) -> None:
        """Route module-level ``get_logger()`` through this context."""
        structlog.configure(
            processors=self.processors(),
            wrapper_class=_BoundLogger,
            context_class=dict,
            logger_factory=SilentPrintLoggerFactory(),
            cache_logger_on_first_use=False,
        )
        self._global = True

    def install_stdlib_handler(self) -> None:
        """Send stdlib ``logging`` records through this context's sinks."""
        from .interceptors import RedirectStdLibHandler

        if self._stdlib_handler is not None:
            return
        handler = RedirectStdLibHandler(self)
        root_logger = logging.getLogger()
        root_logger.handlers = [h for h in root_logger.handlers if not isinstance(h, RedirectStdLibHandler)]
        root_logger.addHandler(handler)
        self._saved_stdlib_level = root_logger.level
        root_logger.setLevel(max(int(self._root_level), logging.DEBUG))
        self._stdlib_handler = handler

    def uninstall_stdlib_handler(self) -> None:
        """Remove the handler and restore the root level it replaced."""
        if self._stdlib_handler is None:
            return
        root_logger = logging.getLogger()
        root_logger.removeHandler(self._stdlib_handler)
        if self._saved_stdlib_level is not None:
            root_logger.setLevel(self._saved_stdlib_level)
            self._saved_stdlib_level = None
        self._stdlib_handler = None

    def set_watcher(self, watcher: Watcher | None) -> None:
        """Take ownership of a config watcher, stopping any previous one."""
        previous, self._watcher = self._watcher, watcher
        if previous is not None and previous is not watcher:
            previous.stop()

    def flush(self) -> None:
        for sink in self._sinks:
            try:
                sink.flush()
            except Exception as exc:
                diagnostics.report("sink %r failed to flush", sink.name, exc=exc)

    def shutdown(self) -> None:
        """Stop watching, detach from stdlib and structlog, flush and close sinks."""
        self.set_watcher(None)
        self.uninstall_stdlib_handler()
        if self._global:
            structlog.reset_defaults()
            self._global = False
        self.flush()
        self.clear_sinks()
        self.configured = False

    def __enter__(self) -> LoggingContext:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()


def _build_sinks(settings: LoggingSettings) -> list[BaseSink]:
    """Create the sinks named in ``settings.sinks``."""
    sinks: list[BaseSink] = []
    for name in (s.strip().lower() for s in settings.sinks.split(",")):
        if name == "stdio":
            sinks.append(StdioSink(fmt=settings.format.value))
        elif name == "file":
            sinks.append(
                FileSink(
                    settings.file_path,
                    max_bytes=settings.max_bytes,
                    backup_count=settings.backup_count,
                )
            )
        elif name:
            diagnostics.report("unknown sink %r in settings, skipped", name)
    return sinks


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger routed through the globally installed context."""
    return structlog.get_logger(_name=name or "root")
