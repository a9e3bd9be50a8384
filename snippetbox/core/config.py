"""
Application configuration using Pydantic Settings.

Configuration values can be set via environment variables or .env file.
"""

import json
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    APP_NAME: str = "Snippetbox"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False  # Send stack traces in 500 responses
    DEV_MODE: bool = False  # Plain-text DEBUG logging
    HOST: str = "0.0.0.0"
    PORT: int = 4000

    # Database
    DATABASE_URL: str = "sqlite:///./data/snippetbox.db"

    # Empty means "load from data/.secret_key or generate one"
    SECRET_KEY: str = ""

    # Sessions
    SESSION_LIFETIME_HOURS: int = 12
    SESSION_COOKIE_NAME: str = "session"
    SESSION_COOKIE_SECURE: bool = True

    # CSRF token lifetime in seconds; 0 means the session lifetime
    CSRF_TOKEN_MAX_AGE: int = 0

    # Users signing up with one of these addresses may create snippets.
    # Accepts a JSON list or a comma-separated string.
    OWNER_EMAILS: str = ""

    PASSWORD_HASH_ROUNDS: int = 12

    # Rate limiting configuration
    RATE_LIMIT_ENABLED: bool = True
    rate_limit_auth_endpoints: str = "10/minute"

    # Optional Redis URL for distributed rate limiting
    # When set, rate limits will be shared across multiple instances
    redis_url: str = ""

    @staticmethod
    def parse_owner_emails(value: str) -> List[str]:
        """Parse OWNER_EMAILS from a JSON list or a comma-separated string."""
        value = value.strip()
        if not value:
            return []
        if value.startswith("["):
            try:
                parsed = json.loads(value)
                return [str(email).strip().lower() for email in parsed if str(email).strip()]
            except json.JSONDecodeError:
                pass
        return [email.strip().lower() for email in value.split(",") if email.strip()]

    @property
    def csrf_token_max_age(self) -> int:
        return self.CSRF_TOKEN_MAX_AGE or self.SESSION_LIFETIME_HOURS * 3600

    @property
    def owner_emails(self) -> List[str]:
        return self.parse_owner_emails(self.OWNER_EMAILS)

    def ensure_data_directory(self) -> None:
        """Create the directory holding a file-based SQLite database."""
        if self.DATABASE_URL.startswith("sqlite:///") and ":memory:" not in self.DATABASE_URL:
            db_path = Path(self.DATABASE_URL.replace("sqlite:///", "", 1))
            db_path.parent.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
