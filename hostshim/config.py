"""Configuration loading for the hostshim test environment.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to the real host identity and logging preferences
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Test environment configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv. Every variable is prefixed
    with HOSTSHIM_.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOSTSHIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Logging preferences, applied before any subsystem initializes
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="TRACE",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )
    log_dump: bool = Field(
        default=True,
        description="Echo log records to stdout",
    )

    # Real host identity
    host_vendor: str = Field(
        default="Mozilla",
        description="Vendor reported by the real host identity service",
    )
    host_name: str = Field(
        default="xpcshell",
        description="Product name reported by the real host",
    )
    host_id: str = Field(
        default="xpcshell@tests.mozilla.org",
        description="Product id reported by the real host",
    )
    host_version: str = Field(
        default="1",
        description="Product version reported by the real host",
    )
    host_build_id: str = Field(
        default="20000101000000",
        description="Application build id reported by the real host",
    )
    platform_version: str = Field(
        default="1",
        description="Platform version reported by the real host",
    )
    platform_build_id: str = Field(
        default="20000101000000",
        description="Platform build id reported by the real host",
    )

    # Daily session
    daily_interval_seconds: float | None = Field(
        default=None,
        description="Fixed delay between daily collections (default: until next midnight)",
    )

    @field_validator(
        "host_vendor",
        "host_name",
        "host_id",
        "host_version",
        "host_build_id",
        "platform_version",
        "platform_build_id",
    )
    @classmethod
    def validate_identity_field(cls, v: str) -> str:
        """Ensure identity fields are non-empty."""
        if not v or not v.strip():
            raise ValueError("identity fields must be non-empty")
        return v

    @field_validator("daily_interval_seconds")
    @classmethod
    def validate_daily_interval(cls, v: float | None) -> float | None:
        """Ensure the daily interval is positive when set."""
        if v is not None and v <= 0:
            raise ValueError("daily_interval_seconds must be positive")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load test environment settings.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
