"""
Application Configuration
Pydantic Settings for environment-based configuration
Source: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
Verified: 2026-10-18
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from v0_mcp import __version__
from v0_mcp.utils.errors import ConfigurationError

LogLevelName = Literal["error", "warn", "info", "debug"]


class Settings(BaseSettings):
    """
    Settings loaded from environment variables (and an optional .env file).

    V0_API_KEY has no default so a missing key is reported by
    validate_config() at startup instead of failing at import time.

    Evidence: field names match environment variables case-insensitively
    Source: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
    Verified: 2026-10-18
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================================================
    # v0 API Configuration
    # ============================================================================
    V0_API_KEY: str | None = Field(default=None, description="v0 API key")
    V0_BASE_URL: str = Field(default="https://api.v0.dev/v1", description="v0 API base URL")
    V0_DEFAULT_MODEL: str = Field(default="v0-1.5-md", description="Default v0 model")
    V0_TIMEOUT: float = Field(default=60.0, description="v0 request timeout (seconds)", gt=0)

    # ============================================================================
    # MCP Configuration
    # ============================================================================
    MCP_SERVER_NAME: str = Field(default="v0-mcp", description="MCP server name")
    MCP_SERVER_VERSION: str = Field(default=__version__, description="MCP server version")

    # ============================================================================
    # Logging
    # ============================================================================
    LOG_LEVEL: LogLevelName = Field(default="info", description="Logging level")
    LOG_JSON_FILE: str | None = Field(
        default=None, description="Write JSON logs to this file instead of stderr"
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept any case, and the stdlib 'warning' spelling."""
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "warning":
                return "warn"
        return v

    @field_validator("V0_BASE_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v


def validate_config(settings: Settings) -> None:
    """
    Fail fast when required settings are absent.

    Raises:
        ConfigurationError: listing every missing value
    """
    required = {
        "V0_API_KEY": settings.V0_API_KEY,
        "V0_BASE_URL": settings.V0_BASE_URL,
        "V0_DEFAULT_MODEL": settings.V0_DEFAULT_MODEL,
    }
    missing = [name for name, value in required.items() if not (value and value.strip())]

    if missing:
        raise ConfigurationError(
            f"Missing required configuration: {', '.join(missing)}",
            missing=missing,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache so the environment is read once per process.
    """
    return Settings()
