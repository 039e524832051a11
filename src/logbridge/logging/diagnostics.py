"""
Internal diagnostic channel.

Failures inside the logging pipeline itself (a sink raising, a config reload
that does not parse) cannot be reported through the pipeline without risking
recursion. They go to a dedicated stdlib logger that writes straight to the
process' original stderr and never propagates to the root logger.
"""

from __future__ import annotations

import logging
import sys

INTERNAL_LOGGER_NAME = "logbridge.internal"

_internal: logging.Logger | None = None


def get_internal_logger() -> logging.Logger:
    global _internal
    if _internal is None:
        lg = logging.getLogger(INTERNAL_LOGGER_NAME)
        lg.propagate = False
        if not lg.handlers:
            handler = logging.StreamHandler(sys.__stderr__)
            handler.setFormatter(logging.Formatter("logbridge: %(levelname)s %(message)s"))
            lg.addHandler(handler)
        lg.setLevel(logging.WARNING)
        _internal = lg
    return _internal


def report(message: str, *args: object, exc: BaseException | None = None) -> None:
    """Report an internal failure; ``exc`` attaches a traceback."""
    exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else None
    get_internal_logger().error(message, *args, exc_info=exc_info)
