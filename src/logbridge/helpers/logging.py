"""
Best-effort helpers for managing a logging context at runtime.

Each helper catches its own failures, logs them through the context it was
given, and reports the outcome as a ``Result`` so callers never have to guard
logging setup with try/except.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from logbridge.exceptions import ConfigFileNotFound, SinkNotFound, SinkTypeMismatch
from logbridge.logging import FILE_SINK_NAME, EventSink, FileSink, Level, LevelRangeFilter
from logbridge.logging.xml_config import configure_and_watch

from .result import Result

if TYPE_CHECKING:
    from logbridge.config import Settings
    from logbridge.config.app import AppSettings
    from logbridge.logging import LoggingContext


@dataclass(frozen=True)
class ConfigSource:
    """The config file that ``try_configure_logging`` applied."""

    path: Path
    is_development: bool


def try_add_event_sink(context: LoggingContext, sink_name: str) -> Result[EventSink]:
    """
    Attach an ``EventSink`` to the context so observers can follow log traffic.

    Opens the root level to everything, registers the sink and marks the
    context configured. On failure the result carries no sink.
    """
    log = context.get_logger(__name__)
    try:
        context.root_level = Level.ALL

        sink = _create_event_sink(context, sink_name)
        if sink is not None:
            context.add_sink(sink)
            context.configured = True
            return Result.success(sink)
    except Exception as exc:
        log.error("Failed to add event sink", sink_name=sink_name, exc_info=exc)
        return Result.failure(exc)

    return Result.failure(f"Could not create event sink {sink_name!r}")


def _create_event_sink(context: LoggingContext, sink_name: str) -> Optional[EventSink]:
    try:
        return EventSink(sink_name)
    except Exception as exc:
        context.get_logger(__name__).error("Failed to create EventSink", sink_name=sink_name, exc_info=exc)
    return None


def application_root_folder(app: Optional[AppSettings] = None) -> Path:
    """Folder holding the application's config files.

    ``LB_APP_ROOT_FOLDER`` wins, then the folder of the main script, then the
    working directory.
    """
    if app is not None and app.root_folder is not None:
        return Path(app.root_folder)
    main_file = getattr(sys.modules.get("__main__"), "__file__", None)
    if main_file:
        return Path(main_file).resolve().parent
    return Path(os.getcwd())


def try_configure_logging(
    context: LoggingContext,
    settings: Optional[Settings] = None,
    *,
    root_folder: Optional[Path] = None,
    is_development: Optional[bool] = None,
) -> Result[ConfigSource]:
    """
    Configure the context from an XML config file in the application folder.

    In the development environment ``logging.development.xml`` is preferred;
    otherwise, or when it is missing, ``logging.xml`` is used. The applied file
    is watched and re-applied when it changes. With neither file present the
    context is left untouched and the result is a failure.

    Args:
        context: Logging context to configure
        settings: Composite settings (defaults to the environment-driven singleton)
        root_folder: Overrides the folder searched for config files
        is_development: Overrides the environment check
    """
    if settings is None:
        from logbridge.config import settings as default_settings

        settings = default_settings

    folder = Path(root_folder) if root_folder is not None else application_root_folder(settings.app)
    if is_development is None:
        is_development = settings.environment.debug
    log_settings = settings.logging

    candidates = []
    if is_development:
        candidates.append((folder / log_settings.development_config_file, True))
    candidates.append((folder / log_settings.config_file, False))

    for path, is_dev_config in candidates:
        if not path.is_file():
            continue
        try:
            configure_and_watch(context, path, interval=log_settings.watch_interval)
        except Exception as exc:
            context.get_logger(__name__).error("Failed to apply logging config", path=str(path), exc_info=exc)
            return Result.failure(exc)
        return Result.success(ConfigSource(path=path, is_development=is_dev_config))

    return Result.failure(ConfigFileNotFound(*(path for path, _ in candidates)))


def try_set_log_level(context: LoggingContext, enable_debug_logging: bool) -> Result[FileSink]:
    """
    Switch the ``file`` sink between verbose (DEBUG..FATAL) and quiet (ERROR..FATAL).

    Fails without raising when no ``file`` sink is registered or it is not a
    ``FileSink``.
    """
    try:
        sink = context.get_sink(FILE_SINK_NAME)
        if sink is None:
            return Result.failure(SinkNotFound(FILE_SINK_NAME))
        if not isinstance(sink, FileSink):
            return Result.failure(SinkTypeMismatch(FILE_SINK_NAME, FileSink, type(sink)))

        sink.clear_filters()

        if enable_debug_logging:
            sink.add_filter(LevelRangeFilter(Level.DEBUG, Level.FATAL))
        else:
            sink.add_filter(LevelRangeFilter(Level.ERROR, Level.FATAL))

        return Result.success(sink)
    except Exception as exc:
        context.get_logger(__name__).error("Failed to set application log level", exc_info=exc)
        return Result.failure(exc)
