"""
logbridge Configuration Module.

Implements the Nested Settings Pattern: each concern is an independent
``BaseSettings`` with its own environment variable prefix.

Multi-Environment Support:
    Set `LB_ENV` to one of: development, testing, staging, production
    The system will load .env files in this order (later overrides earlier):
    1. .env
    2. .env.local
    3. .env.{environment}
    4. .env.{environment}.local

Usage:
    from logbridge.config import settings

    settings.environment.is_development
    settings.logging.level
    settings.app.root_folder
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .app import AppSettings
from .environment import EnvironmentSettings
from .logging import LogFormat, LoggingSettings, LogLevel


class Settings(BaseSettings):
    """
    Composite settings aggregating the configuration domains.

    Sub-settings are built lazily, each from its own env prefix. The
    environment is resolved first and decides which .env files the others read.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    @cached_property
    def environment(self) -> EnvironmentSettings:
        return EnvironmentSettings()

    @cached_property
    def app(self) -> AppSettings:
        return AppSettings(_env_file=self.environment.env_files)

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings(_env_file=self.environment.env_files)


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "AppSettings",
    "EnvironmentSettings",
    "LoggingSettings",
    "LogLevel",
    "LogFormat",
]
