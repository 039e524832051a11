from .logging import ConfigSource, try_add_event_sink, try_configure_logging, try_set_log_level
from .process import get_current_process, running_process_instance_count
from .result import Result

__all__ = [
    "ConfigSource",
    "Result",
    "get_current_process",
    "running_process_instance_count",
    "try_add_event_sink",
    "try_configure_logging",
    "try_set_log_level",
]
