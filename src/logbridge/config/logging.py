"""
Logging Configuration.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    FATAL = "FATAL"


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class LoggingSettings(BaseSettings):
    """Logging infrastructure configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LB_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: LogLevel = Field(default=LogLevel.INFO, description="Root log level")
    sinks: str = Field(default="stdio", description="Comma-separated sink names (stdio, file)")
    format: LogFormat = Field(default=LogFormat.CONSOLE, description="Output format for the stdio sink")
    file_path: str = Field(default="logs/logbridge.log", description="Path for file sink")
    max_bytes: int = Field(default=10 * 1024 * 1024, description="File sink rotation size")
    backup_count: int = Field(default=5, description="Rotated files kept by the file sink")
    intercept_stdlib: bool = Field(default=True, description="Redirect stdlib logging into the sinks")
    config_file: str = Field(default="logging.xml", description="Logging config file name")
    development_config_file: str = Field(
        default="logging.development.xml",
        description="Logging config file preferred in the development environment",
    )
    watch_interval: float = Field(default=2.0, gt=0, description="Seconds between config file checks")
    console_timestamp_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Console timestamp format",
    )
    console_level_width: int = Field(default=5, description="Console level column width")
    console_logger_width: int = Field(default=32, description="Console logger column width")
    console_separator: str = Field(default=" | ", description="Console column separator")
