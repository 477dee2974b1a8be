"""Application settings using Pydantic Settings for typed configuration.

This module centralizes all configuration and provides type-safe access to settings.
Settings are loaded from environment variables with sensible defaults.
"""

from datetime import timedelta
from typing import Literal

from fastapi import Request
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env_name: str = Field(default="development", alias="ENV_NAME")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    # Database
    database_url: str = Field(alias="DATABASE_URL")

    # Sessions
    session_secret_key: str = Field(alias="SESSION_SECRET_KEY")
    session_ttl_minutes: int = Field(
        default=30, alias="SESSION_TTL_MINUTES", ge=1, le=1440
    )

    # CORS
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    # Google OAuth
    google_client_id: str = Field(alias="GOOGLE_CLIENT_ID")
    google_client_secret: str = Field(alias="GOOGLE_CLIENT_SECRET")
    google_callback_url: str = Field(alias="GOOGLE_CALLBACK_URL")
    oauth_success_url: str = Field(default="/profile", alias="OAUTH_SUCCESS_URL")
    oauth_failure_url: str = Field(default="/", alias="OAUTH_FAILURE_URL")

    # Local credentials
    bcrypt_rounds: int = Field(default=12, alias="BCRYPT_ROUNDS", ge=4, le=16)

    # Which federated profile fields are persisted on first login
    profile_capture: Literal["minimal", "full"] = Field(
        default="full", alias="PROFILE_CAPTURE"
    )

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        origins = []
        for o in self.cors_origins.split(","):
            trimmed = o.strip()
            if trimmed:
                origins.append(trimmed)
        return origins

    @computed_field
    @property
    def is_secure_cookie(self) -> bool:
        """Determine if cookies should be set with Secure flag."""
        return self.env_name.lower() not in {"dev", "development", "local"}

    @computed_field
    @property
    def session_ttl(self) -> timedelta:
        """Get session inactivity timeout as timedelta."""
        return timedelta(minutes=self.session_ttl_minutes)


def load_settings() -> Settings:
    """Load settings from the environment.

    Called once by the application factory; the instance is then
    carried on ``app.state`` rather than cached at module level.
    """
    return Settings()  # type: ignore[call-arg]


def get_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""
    return request.app.state.settings
