# booking/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "dev"
    APP_NAME: str = "Booking Backend"
    LOG_LEVEL: str = "INFO"

    # DB URL – SQLite locally, Postgres in deployed envs
    DATABASE_URL: str = "sqlite:///./booking.db"

    # Google OAuth client used to refresh organizer tokens
    GOOGLE_CLIENT_ID: Optional[str] = None
    GOOGLE_CLIENT_SECRET: Optional[str] = None
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    GOOGLE_CALENDAR_API_BASE: str = "https://www.googleapis.com/calendar/v3"

    # Upper bound for every remote calendar / token request
    CALENDAR_HTTP_TIMEOUT_SECONDS: float = 10.0

    # Tokens expiring within this margin are refreshed up front
    TOKEN_EXPIRY_SKEW_SECONDS: int = 300

    # Reject bookings overlapping an existing scheduled meeting of the same event
    PREVENT_DOUBLE_BOOKING: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

_settings: Optional[Settings] = None

def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
