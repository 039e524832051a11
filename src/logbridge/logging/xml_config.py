"""
XML logging configuration with optional file watching.

Schema:

    <logging level="INFO">
      <sink name="console" type="stdio" format="console" stream="stderr"/>
      <sink name="file" type="file" path="logs/app.log" max-bytes="10485760"
            backup-count="5" threshold="DEBUG">
        <filter min="DEBUG" max="FATAL"/>
      </sink>
    </logging>

Relative sink paths resolve against the config file's folder. Applying a
config replaces the sinks a previous apply of the same configurator created;
sinks registered by other code (the event sink, for one) are left alone.
"""

from __future__ import annotations

import sys
import threading
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import TYPE_CHECKING, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from logbridge.exceptions import InvalidConfiguration

from . import diagnostics
from .levels import Level, LevelRangeFilter
from .sinks import FILE_SINK_NAME, BaseSink, FileSink, StdioSink

if TYPE_CHECKING:
    from .core import LoggingContext


# =============================================================================
# Schema
# =============================================================================


class FilterConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    level_min: Level = Field(default=Level.ALL, alias="min")
    level_max: Level = Field(default=Level.OFF, alias="max")
    accept_on_match: bool = Field(default=True, alias="accept-on-match")

    @field_validator("level_min", "level_max", mode="before")
    @classmethod
    def _parse_level(cls, v: object) -> Level:
        return Level.parse(v)  # type: ignore[arg-type]

    def build(self) -> LevelRangeFilter:
        return LevelRangeFilter(self.level_min, self.level_max, accept_on_match=self.accept_on_match)


class SinkConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1)
    type: Literal["stdio", "file"]
    threshold: Level = Level.ALL
    format: Literal["console", "json"] = "console"
    stream: Literal["stdout", "stderr"] = "stderr"
    path: Optional[str] = None
    max_bytes: int = Field(default=10 * 1024 * 1024, alias="max-bytes")
    backup_count: int = Field(default=5, ge=0, alias="backup-count")
    filters: List[FilterConfig] = Field(default_factory=list)

    @field_validator("threshold", mode="before")
    @classmethod
    def _parse_level(cls, v: object) -> Level:
        return Level.parse(v)  # type: ignore[arg-type]

    def build(self, base_dir: Path) -> BaseSink:
        sink: BaseSink
        if self.type == "stdio":
            stream = sys.stdout if self.stream == "stdout" else sys.stderr
            sink = StdioSink(self.name, fmt=self.format, stream=stream, threshold=self.threshold)
        else:
            path = Path(self.path or f"{FILE_SINK_NAME}.log")
            if not path.is_absolute():
                path = base_dir / path
            sink = FileSink(
                path,
                name=self.name,
                max_bytes=self.max_bytes,
                backup_count=self.backup_count,
                threshold=self.threshold,
            )
        for f in self.filters:
            sink.add_filter(f.build())
        return sink


class XmlLoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Level = Level.INFO
    sinks: List[SinkConfig] = Field(default_factory=list)

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, v: object) -> Level:
        return Level.parse(v)  # type: ignore[arg-type]


def parse_config(path: Path | str) -> XmlLoggingConfig:
    """Read and validate an XML logging config file."""
    path = Path(path)
    try:
        root = ET.parse(path).getroot()
    except (ET.ParseError, OSError) as exc:
        raise InvalidConfiguration(path, str(exc)) from exc

    if root.tag != "logging":
        raise InvalidConfiguration(path, f"root element must be <logging>, got <{root.tag}>")

    sinks = []
    for element in root:
        if element.tag != "sink":
            raise InvalidConfiguration(path, f"unexpected element <{element.tag}>")
        data: dict = dict(element.attrib)
        data["filters"] = [dict(f.attrib) for f in element if f.tag == "filter"]
        sinks.append(data)

    try:
        return XmlLoggingConfig.model_validate({**root.attrib, "sinks": sinks})
    except (ValidationError, ValueError) as exc:
        raise InvalidConfiguration(path, str(exc)) from exc


# =============================================================================
# Configurator
# =============================================================================


class XmlConfigurator:
    """Applies one config file to a context, replacing its own earlier sinks."""

    def __init__(self, context: LoggingContext, path: Path | str):
        self.context = context
        self.path = Path(path)
        self._sinks: list[BaseSink] = []

    def configure(self) -> None:
        config = parse_config(self.path)
        base_dir = self.path.parent

        # Build everything before touching the context so a bad file leaves
        # the previous configuration in place.
        new_sinks: list[BaseSink] = []
        try:
            for sink_config in config.sinks:
                new_sinks.append(sink_config.build(base_dir))
        except Exception:
            for sink in new_sinks:
                sink.close()
            raise

        self.context.detach_sinks(self._sinks)
        for sink in new_sinks:
            self.context.add_sink(sink)
        self._sinks = new_sinks
        self.context.root_level = config.level
        self.context.configured = True


class ConfigWatcher:
    """Polls a config file and re-applies it when it changes on disk.

    Polling runs on a daemon ``threading.Timer``; ``check()`` runs one poll
    synchronously.
    """

    def __init__(self, configurator: XmlConfigurator, interval: float = 2.0):
        self._configurator = configurator
        self._interval = interval
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._closed = False
        self._signature = self._stat()

    @property
    def path(self) -> Path:
        return self._configurator.path

    def _stat(self) -> tuple[int, int] | None:
        try:
            st = self.path.stat()
        except OSError:
            return None
        return (st.st_mtime_ns, st.st_size)

    def start(self) -> None:
        self._closed = False
        self._schedule()

    def _schedule(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._timer = threading.Timer(self._interval, self._tick)
            self._timer.daemon = True
            self._timer.start()

    def _tick(self) -> None:
        self.check()
        self._schedule()

    def check(self) -> bool:
        """Re-apply the config if the file changed. Returns True on reload."""
        with self._lock:
            signature = self._stat()
            if signature is None or signature == self._signature:
                return False
            self._signature = signature
            try:
                self._configurator.configure()
            except Exception as exc:
                diagnostics.report("reloading %s failed, keeping previous config", self.path, exc=exc)
                return False
            return True

    def stop(self) -> None:
        with self._lock:
            self._closed = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


def configure(context: LoggingContext, path: Path | str) -> XmlConfigurator:
    """Apply a config file once."""
    configurator = XmlConfigurator(context, path)
    configurator.configure()
    return configurator


def configure_and_watch(context: LoggingContext, path: Path | str, interval: float = 2.0) -> ConfigWatcher:
    """Apply a config file and keep re-applying it when it changes."""
    watcher = ConfigWatcher(configure(context, path), interval=interval)
    context.set_watcher(watcher)
    watcher.start()
    return watcher
