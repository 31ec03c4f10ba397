"""
Configuration management for Granule Discovery.

This module provides environment-based configuration using Pydantic BaseSettings.
Per-invocation input (provider, collection, buckets) is NOT configured here; it
arrives with each run and is validated by `granule_discovery.config.schema`.
Settings only hold deployment concerns:
catalog location, credential identity, secret references and transport limits.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def _resolve_env_file() -> Path:
    """`.env` at the project root unless GD_ENV_FILE points elsewhere."""
    override = os.getenv("GD_ENV_FILE")
    if not override:
        return PROJECT_ROOT / ".env"
    path = Path(override).expanduser()
    return path if path.is_absolute() else PROJECT_ROOT / path


SETTINGS_ENV_FILE = _resolve_env_file()


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Environment variables are automatically loaded with the GD_ prefix.
    For example, GD_ARCHIVE_API_URI overrides the archive_api_uri setting.
    LOG_LEVEL is read without prefix.
    """

    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )

    # Catalog (archive API) used for duplicate detection
    archive_api_uri: str = Field(
        default="", description="Base URL of the granule catalog API"
    )
    catalog_timeout: int = Field(
        default=30, description="Catalog lookup timeout in seconds"
    )
    catalog_max_workers: int = Field(
        default=8,
        ge=1,
        description="Maximum concurrent catalog lookups per invocation",
    )

    # Token acquisition
    oauth_provider: Literal["earthdata", "launchpad"] = Field(
        default="earthdata", description="OAuth provider used to obtain tokens"
    )
    urs_id: str = Field(default="", description="Earthdata Login username")
    urs_password_secret_name: str = Field(
        default="", description="Secret name holding the Earthdata Login password"
    )
    launchpad_passphrase_secret_name: str = Field(
        default="", description="Secret name holding the Launchpad passphrase"
    )
    launchpad_api: str = Field(default="", description="Launchpad token API URL")
    launchpad_certificate: str = Field(
        default="", description="Path to the Launchpad client certificate (PEM)"
    )
    auth_timeout: int = Field(
        default=30, description="Token endpoint timeout in seconds"
    )

    # Secret sources
    secrets_dir: Optional[str] = Field(
        default=None,
        description="Directory of files named after secrets (checked after env vars)",
    )

    # Provider listing
    provider_timeout: int = Field(
        default=30, description="Provider listing timeout in seconds"
    )

    @field_validator("archive_api_uri", "launchpad_api")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="GD_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()
