"""
Environment Configuration.

The environment is determined by the `LB_ENV` environment variable and plays
the role a debug build plays elsewhere: in development, config discovery
prefers the development logging config file.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


Environment = Literal["development", "testing", "staging", "production"]


class EnvironmentSettings(BaseSettings):
    """
    Environment detection and configuration.

    Only `.env` is read to find the environment itself; the other settings
    then layer the files listed by `env_files`.
    """

    model_config = SettingsConfigDict(
        env_prefix="LB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: Environment = Field(
        default="development",
        description="Current environment (development, testing, staging, production)",
    )

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def env_files(self) -> tuple[str, ...]:
        """
        The .env files to load for this environment.

        Later files override earlier ones.
        """
        return (
            ".env",
            ".env.local",
            f".env.{self.env}",
            f".env.{self.env}.local",
        )

    @property
    def debug(self) -> bool:
        """Only the development environment counts as a debug build."""
        return self.is_development
