"""Application settings loaded from the environment and .env via Pydantic."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class ShellSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CHOMP_SHELL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    frame_interval_ms: int = Field(default=16, ge=1)
    optimizer: str = "chomp"
    session_file: Optional[Path] = None

    @field_validator("session_file", mode="before")
    @classmethod
    def _expand_session_file(cls, value: Optional[Path]) -> Optional[Path]:
        if value in (None, ""):
            return None
        return Path(value).expanduser().resolve()


_settings: Optional[ShellSettings] = None


def get_settings() -> ShellSettings:
    global _settings
    if _settings is None:
        _settings = ShellSettings()
        logger.debug("Loaded settings: %s", _settings)
    return _settings


def default_session_file() -> Optional[Path]:
    path = get_settings().session_file
    if path is not None and not path.exists():
        logger.warning("CHOMP_SHELL_SESSION_FILE points to a missing file: %s", path)
        return None
    return path


def reset_settings_cache() -> None:
    global _settings
    _settings = None
