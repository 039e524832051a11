"""
Interceptors for capturing standard library and third-party logs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .diagnostics import INTERNAL_LOGGER_NAME
from .levels import Level

if TYPE_CHECKING:
    from .core import LoggingContext


class RedirectStdLibHandler(logging.Handler):
    """
    Redirect standard library logging events into a logging context.
    This ensures third-party logs pass through the same sinks as our own.
    """

    def __init__(self, context: LoggingContext):
        super().__init__()
        self._context = context

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Skip our own diagnostics and structlog's to avoid loops
            if record.name.startswith((INTERNAL_LOGGER_NAME, "structlog")):
                return

            # Format message using stdlib's formatting (handles %s args)
            msg = record.getMessage()

            level = min(max(Level.parse(record.levelno), Level.DEBUG), Level.FATAL)
            logger = self._context.get_logger(record.name or "stdlib")
            if record.exc_info:
                logger.log(int(level), msg, exc_info=record.exc_info)
            else:
                logger.log(int(level), msg)
        except Exception:
            self.handleError(record)
