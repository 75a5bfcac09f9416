"""
Configuration management for docflow.

This module provides environment-based configuration using Pydantic BaseSettings,
so embedding adapters can tune logging and record serialization without code
changes.
"""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for resolving .env by default
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("DOCFLOW_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Environment variables are loaded with the DOCFLOW_ prefix. For example,
    DOCFLOW_JSON_SORT_KEYS=true sorts keys of every processed record.
    LOG_LEVEL is also honoured without the prefix.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("DOCFLOW_LOG_LEVEL", "LOG_LEVEL"),
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_to_file: bool = Field(
        default=False, description="Also write logs to a daily rotating file"
    )
    log_file_dir: str = Field(
        default="logs", description="Directory for rotating log files"
    )

    # Record serialization
    json_sort_keys: bool = Field(
        default=False, description="Sort object keys when encoding records"
    )
    json_ensure_ascii: bool = Field(
        default=False, description="Escape non-ASCII characters in encoded records"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{v}'. Expected one of {list(VALID_LOG_LEVELS)}"
            )
        return level

    model_config = SettingsConfigDict(
        env_prefix="DOCFLOW_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()
