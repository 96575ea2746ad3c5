"""Client settings with Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://api.twitter.com/"
DEFAULT_UPLOAD_BASE_URL = "https://upload.twitter.com/"


class Settings(BaseSettings):
    """Client settings loaded from TWITTER_* environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    app_mode: Literal["development", "production"] = Field(
        default="development",
        alias="TWITTER_APP_MODE",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "silent"] = Field(
        default="INFO",
        alias="TWITTER_LOG_LEVEL",
    )

    # Endpoints
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, alias="TWITTER_API_BASE_URL")
    upload_base_url: str = Field(default=DEFAULT_UPLOAD_BASE_URL, alias="TWITTER_UPLOAD_BASE_URL")
    timeout: float = Field(default=30.0, alias="TWITTER_TIMEOUT")

    # Application credentials
    application_key: Optional[SecretStr] = Field(default=None, alias="TWITTER_APPLICATION_KEY")
    application_secret: Optional[SecretStr] = Field(default=None, alias="TWITTER_APPLICATION_SECRET")

    @field_validator("app_mode", mode="before")
    @classmethod
    def _normalize_app_mode(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return "silent" if value.lower() == "silent" else value.upper()
        return value

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_mode == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]
