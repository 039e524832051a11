"""
Log formatters and color utilities.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

# =============================================================================
# Console Formatter (Aligned Columns)
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "timestamp": "\033[90m",
    "logger": "\033[35m",
    "key": "\033[34m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class ConsoleFormatter:
    """Handles human-readable console log rendering (fixed width, right-aligned)."""

    _RESET = "\x1b[0m"
    _LEVEL_COLORS = {
        "DEBUG": "\x1b[36m",
        "INFO": "\x1b[32m",
        "WARN": "\x1b[33m",
        "ERROR": "\x1b[31m",
        "FATAL": "\x1b[1;31m",
    }

    EXCLUDED_KEYS = {"level", "message", "logger", "timestamp", "exception"}
    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
    TIMESTAMP_WIDTH = 19
    LEVEL_WIDTH = 5
    LOGGER_WIDTH = 32
    SEPARATOR = " | "

    @classmethod
    def configure(
        cls,
        *,
        timestamp_format: str | None = None,
        level_width: int | None = None,
        logger_width: int | None = None,
        separator: str | None = None,
    ) -> None:
        """Configure alignment and rendering parameters."""
        if timestamp_format:
            cls.TIMESTAMP_FORMAT = timestamp_format
            cls.TIMESTAMP_WIDTH = len(datetime.now().strftime(timestamp_format))
        if level_width:
            cls.LEVEL_WIDTH = level_width
        if logger_width:
            cls.LOGGER_WIDTH = logger_width
        if separator is not None:
            cls.SEPARATOR = separator

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            if width <= 3:
                text = text[-width:]
            else:
                text = "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    @classmethod
    def _format_timestamp(cls, raw_timestamp: datetime | str | None) -> str:
        dt: datetime | None = None
        if isinstance(raw_timestamp, datetime):
            dt = raw_timestamp
        elif raw_timestamp:
            try:
                dt = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))
            except (ValueError, TypeError):
                dt = None
        if dt is None:
            return datetime.now().strftime(cls.TIMESTAMP_FORMAT)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone().strftime(cls.TIMESTAMP_FORMAT)

    @classmethod
    def _colorize_level(cls, text: str, level_upper: str, use_color: bool) -> str:
        if not use_color:
            return text
        color = cls._LEVEL_COLORS.get(level_upper)
        if not color:
            return text
        return f"{color}{text}{cls._RESET}"

    @staticmethod
    def _maybe_color(text: str, color: str, use_color: bool) -> str:
        if not use_color:
            return text
        return colorize(text, color)

    @classmethod
    def format(cls, event_dict: Mapping[str, Any], *, use_color: bool = True) -> str:
        """Format a flattened record into an aligned string."""
        level_upper = str(event_dict.get("level", "INFO")).upper()
        message_text = str(event_dict.get("message", ""))
        logger_name = str(event_dict.get("logger", "root"))
        timestamp = cls._format_timestamp(event_dict.get("timestamp"))

        extras = []
        for k, v in event_dict.items():
            if k not in cls.EXCLUDED_KEYS:
                key_colored = cls._maybe_color(k, "key", use_color)
                value_colored = cls._maybe_color(str(v), "dim", use_color)
                extras.append(f"{key_colored}={value_colored}")

        if extras:
            message_text = f"{message_text} " + " ".join(extras)

        level_text = cls._colorize_level(
            cls._fit_right(level_upper, cls.LEVEL_WIDTH),
            level_upper,
            use_color,
        )

        line = "".join(
            [
                cls._maybe_color(cls._fit_right(timestamp, cls.TIMESTAMP_WIDTH), "timestamp", use_color),
                cls.SEPARATOR,
                level_text,
                cls.SEPARATOR,
                cls._maybe_color(cls._fit_right(logger_name, cls.LOGGER_WIDTH), "logger", use_color),
                cls.SEPARATOR,
                message_text,
            ]
        )

        exception = event_dict.get("exception")
        if exception:
            line = f"{line}\n{exception}"
        return line
