"""
Severity levels and level-range filters.
"""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .records import LogRecord


class Level(IntEnum):
    """Ordered severity levels.

    Values line up with the stdlib ``logging`` constants so stdlib records and
    structlog method names map onto them without a lookup table.
    """

    ALL = 0
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR
    FATAL = logging.CRITICAL
    OFF = 2**31 - 1

    @classmethod
    def parse(cls, value: str | int | Level) -> Level:
        """Resolve a level from a name, an alias or a stdlib integer."""
        if isinstance(value, Level):
            return value
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, int):
            return cls._from_int(value)

        key = str(value).strip().upper()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}") from None

    @classmethod
    def _from_int(cls, value: int) -> Level:
        # Custom stdlib levels (e.g. 25) round down to the nearest known level.
        for level in sorted(cls, reverse=True):
            if value >= level:
                return level
        return cls.ALL


_ALIASES: dict[str, Level] = {
    "WARNING": Level.WARN,
    "CRITICAL": Level.FATAL,
    "EXCEPTION": Level.ERROR,
    "ERR": Level.ERROR,
    "NOTSET": Level.ALL,
}


class LevelRangeFilter:
    """Accept records whose level falls inside the inclusive [min, max] range."""

    def __init__(
        self,
        level_min: Level = Level.ALL,
        level_max: Level = Level.OFF,
        *,
        accept_on_match: bool = True,
    ) -> None:
        self.level_min = Level.parse(level_min)
        self.level_max = Level.parse(level_max)
        if self.level_min > self.level_max:
            raise ValueError(
                f"level_min {self.level_min.name} is above level_max {self.level_max.name}"
            )
        self.accept_on_match = accept_on_match

    def decide(self, record: LogRecord) -> bool:
        in_range = self.level_min <= record.level <= self.level_max
        return in_range if self.accept_on_match else not in_range

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LevelRangeFilter):
            return NotImplemented
        return (
            self.level_min == other.level_min
            and self.level_max == other.level_max
            and self.accept_on_match == other.accept_on_match
        )

    def __hash__(self) -> int:
        return hash((self.level_min, self.level_max, self.accept_on_match))

    def __repr__(self) -> str:
        return f"LevelRangeFilter({self.level_min.name}, {self.level_max.name})"
