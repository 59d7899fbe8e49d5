"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key used to verify JWT access tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone (or UTC offset) used for timestamps and schedules",
    )
    frontend_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the web client, used to build absolute links in emails",
    )
    daily_digest_cron: str = Field(
        default="0 9 * * *", description="Cron expression for the daily digest run"
    )
    weekly_digest_cron: str = Field(
        default="0 9 * * MON", description="Cron expression for the weekly digest run"
    )
    due_reminder_cron: str = Field(
        default="0 9 * * *", description="Cron expression for the due date reminder run"
    )
    due_reminder_horizon_days: int = Field(
        default=3,
        description="Tasks due within this many days receive a reminder",
        ge=0,
    )
    sse_keepalive_seconds: float = Field(
        default=25.0,
        description="Seconds of inactivity before a keep-alive comment is streamed",
        gt=0,
    )
    email_workers: int = Field(
        default=4, description="Worker threads used to send email", gt=0
    )
    scheduler_enabled: bool = Field(
        default=True, description="Start the digest and reminder timers on startup"
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
