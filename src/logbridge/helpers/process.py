"""
Process table helpers.
"""

from __future__ import annotations

import logging

import psutil

# Stdlib logger: silent unless a context intercepts stdlib logging
logger = logging.getLogger(__name__)


def get_current_process() -> psutil.Process:
    """Return a handle to the current process."""
    return psutil.Process()


def running_process_instance_count(process_name: str) -> int:
    """
    Count running processes whose name contains ``process_name``.

    Processes that exit or deny access while the table is walked are skipped.
    """
    count = 0
    for proc in psutil.process_iter(["name"]):
        name = proc.info.get("name") or ""
        if process_name in name:
            count += 1
    logger.debug("counted %d running processes matching %r", count, process_name)
    return count
