"""
Application Configuration.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Basic application metadata."""

    model_config = SettingsConfigDict(
        env_prefix="LB_APP_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    name: str = "logbridge"
    # Folder searched for logging config files; defaults to the main script's folder
    root_folder: Optional[Path] = None
