"""Runtime configuration loaded from environment variables and an optional .env file."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, get_args

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
LOG_LEVELS: tuple[str, ...] = get_args(LogLevel)


class Settings(BaseSettings):
    """Planner settings; every field can be set as PLANBUILDER_<NAME>."""

    model_config = SettingsConfigDict(
        env_prefix="PLANBUILDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Directory with modules/ and templates/ JSON; bundled content when unset.
    catalog_dir: Path | None = None

    log_level: LogLevel = "WARNING"
    log_file: Path | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
