"""Configuration management using Pydantic Settings."""
from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SecuritySettings(BaseSettings):
    """Token signing settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    secret_key: SecretStr = SecretStr("change-me-in-production")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    @field_validator("access_token_expire_minutes")
    @classmethod
    def validate_expiry(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Token expiry must be at least 1 minute")
        return v


class AppSettings(BaseSettings):
    """Application-level settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_title: str = "Club Stay Reservation API"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    # Load the demo reservations and billing records at startup
    seed_demo_data: bool = True


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()


@lru_cache
def get_security_settings() -> SecuritySettings:
    """Get cached token settings."""
    return SecuritySettings()
