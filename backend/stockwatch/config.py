"""Runtime settings, loaded from environment variables."""

from decimal import Decimal
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
DEFAULT_SESSION_SECRET = "stockwatch-secret-key-change-in-production"


class Settings(BaseSettings):
    """Application settings.

    Defaults give a working local setup. Each field is overridden by the
    environment variable of the same name (case-insensitive); blank values
    are ignored.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    # "production" turns on secure cookies
    env: str = "development"

    # Simulator and fan-out cadence
    tick_interval_ms: int = 1000
    # Per-user store fetch budget inside one tick
    fetch_timeout: float = 0.5
    # Per-message delivery budget before a slow channel is skipped
    send_timeout: float = 1.0

    # Session cookie (signed JWT)
    session_secret: str = DEFAULT_SESSION_SECRET
    session_algorithm: str = "HS256"
    session_max_age: int = 24 * 60 * 60  # seconds

    # Login hardening
    login_rate_limit: str = "5 per 15 minutes"
    login_delay: float = 0.1  # seconds, applied to every login

    starting_cash: Decimal = Decimal("100000")

    # Comma-separated list of allowed origins
    cors_origins: str = "*"

    log_level: str = "INFO"

    @field_validator("tick_interval_ms")
    @classmethod
    def validate_tick_interval(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("tick_interval_ms must be positive")
        return v

    @field_validator("fetch_timeout", "send_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        upper_v = v.strip().upper()
        if upper_v not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}")
        return upper_v

    @property
    def tick_interval(self) -> float:
        """Tick period in seconds."""
        return self.tick_interval_ms / 1000

    @property
    def secure_cookies(self) -> bool:
        return self.env.strip().lower() == "production"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
