"""
Application configuration with environment-driven settings.
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PRIORITY_COUNTRY = "United States"
DEFAULT_LIMIT = 50_000


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CONTACT_FILTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"

    # Pipeline defaults (overridable from the command line)
    priority_country: str = Field(
        default=DEFAULT_PRIORITY_COUNTRY,
        description="Country whose contacts are placed first in the output",
    )
    limit: int = Field(
        default=DEFAULT_LIMIT,
        ge=0,
        description="Maximum number of contacts written to the output",
    )

    # File handling
    encoding: str = Field(
        default="utf-8",
        description="Encoding used for the filter file and both CSV files",
    )
    delimiter: str = Field(
        default=",",
        min_length=1,
        max_length=1,
        description="CSV field delimiter",
    )
    line_terminator: str = Field(
        default="\n",
        description="Record terminator used when writing the output CSV",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        return str(v).strip().upper()


@lru_cache
def _get_settings_cached() -> Settings:
    return Settings()


def get_settings() -> Settings:
    # Under pytest the environment is monkeypatched per test, so skip the cache.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        return Settings()
    return _get_settings_cached()
