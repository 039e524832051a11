"""
Exception hierarchy for logbridge.

Errors are split into sink errors (construction, lookup, type checks) and
configuration errors (config file discovery and parsing). The ``try_*``
helpers convert all of them into ``Result`` failures at the public boundary.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional


class LogBridgeError(Exception):
    """Base class for every logbridge error."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


# ================================
# Sink errors
# ================================


class SinkError(LogBridgeError):
    """Raised for sink construction and registry lookup problems."""

    pass


class InvalidSinkName(SinkError):
    def __init__(self, name: Any) -> None:
        super().__init__(
            f"Sink name must be a non-empty string, got {name!r}",
            code="SINK_INVALID_NAME",
            details={"name": name},
        )


class SinkNotFound(SinkError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"No sink named {name!r} is registered",
            code="SINK_NOT_FOUND",
            details={"name": name},
        )


class SinkTypeMismatch(SinkError):
    def __init__(self, name: str, expected: type, actual: type) -> None:
        super().__init__(
            f"Sink {name!r} is a {actual.__name__}, expected {expected.__name__}",
            code="SINK_TYPE_MISMATCH",
            details={"name": name, "expected": expected.__name__, "actual": actual.__name__},
        )


# ================================
# Configuration errors
# ================================


class ConfigurationError(LogBridgeError):
    """Raised when a logging configuration cannot be found or applied."""

    pass


class ConfigFileNotFound(ConfigurationError):
    def __init__(self, *candidates: Path) -> None:
        names = ", ".join(str(p) for p in candidates)
        super().__init__(
            f"No logging config file found (looked for: {names})",
            code="CONFIG_NOT_FOUND",
            details={"candidates": [str(p) for p in candidates]},
        )


class InvalidConfiguration(ConfigurationError):
    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(
            f"Invalid logging config {path}: {reason}",
            code="CONFIG_INVALID",
            details={"path": str(path), "reason": reason},
        )
