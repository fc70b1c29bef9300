"""Environment configuration and validation.

This module defines strongly-typed application settings loaded from environment variables
(optionally via a local `.env` file).

The HubSpot token is optional at startup: without it the search endpoints answer 503 instead of the
process refusing to start.
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.hubspot.client import DEFAULT_API_BASE, DEFAULT_TIMEOUT_S


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    hubspot_token: str | None = Field(default=None, alias="HUBSPOT_PRIVATE_APP_TOKEN")
    hubspot_api_base: str = Field(default=DEFAULT_API_BASE, alias="HUBSPOT_API_BASE")
    hubspot_timeout_s: float = Field(default=DEFAULT_TIMEOUT_S, alias="HUBSPOT_TIMEOUT_S")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("hubspot_token")
    @classmethod
    def blank_token_is_unset(cls, value: str | None) -> str | None:
        """Treat an empty `HUBSPOT_PRIVATE_APP_TOKEN=` line as "not configured"."""

        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("hubspot_api_base")
    @classmethod
    def validate_api_base(cls, value: str) -> str:
        """Require an absolute http(s) base URL; a trailing slash is dropped."""

        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("HUBSPOT_API_BASE must be an http(s) URL")
        return value

    @field_validator("hubspot_timeout_s")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("HUBSPOT_TIMEOUT_S must be positive")
        return value


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
