"""
Immutable log record handed to sinks.
"""

from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping

from structlog.typing import EventDict

from .levels import Level

# Keys produced by the processor chain that map onto record fields.
_RESERVED_KEYS = frozenset({"timestamp", "level", "message", "event", "logger", "_name", "exc_info"})


@dataclass(frozen=True)
class LogRecord:
    """One log call as seen by the sinks.

    Sinks must not keep a record beyond ``append``; observers that want to
    hold on to one should copy what they need.
    """

    timestamp: datetime
    level: Level
    message: str
    logger_name: str = "root"
    error: BaseException | None = None
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.extra, MappingProxyType):
            object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def from_event_dict(cls, event_dict: EventDict) -> LogRecord:
        """Build a record from the event dict at the end of the processor chain."""
        timestamp = event_dict.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        elif not isinstance(timestamp, datetime):
            timestamp = datetime.now(timezone.utc)

        message = event_dict.get("message", event_dict.get("event", ""))
        extra = {k: v for k, v in event_dict.items() if k not in _RESERVED_KEYS}

        return cls(
            timestamp=timestamp,
            level=Level.parse(event_dict.get("level", "info")),
            message="" if message is None else str(message),
            logger_name=str(event_dict.get("logger", "root")),
            error=_resolve_error(event_dict.get("exc_info")),
            extra=extra,
        )

    def to_event_dict(self) -> dict[str, Any]:
        """Flatten to a plain dict for console and JSON rendering."""
        d: dict[str, Any] = {
            "timestamp": self.timestamp,
            "level": self.level.name,
            "logger": self.logger_name,
            "message": self.message,
        }
        d.update(self.extra)
        if self.error is not None:
            d["exception"] = "".join(
                traceback.format_exception(type(self.error), self.error, self.error.__traceback__)
            ).rstrip()
        return d


def _resolve_error(exc_info: Any) -> BaseException | None:
    """Normalize structlog/stdlib ``exc_info`` values to an exception instance."""
    if not exc_info:
        return None
    if isinstance(exc_info, BaseException):
        return exc_info
    if isinstance(exc_info, tuple):
        return exc_info[1] if len(exc_info) > 1 else None
    # exc_info=True: pick up the exception currently being handled
    return sys.exc_info()[1]
