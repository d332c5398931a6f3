"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from decimal import Decimal
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/ledger.log"

    # Investment return scheduler
    return_scheduler_interval_seconds: int = Field(
        default=60,
        gt=0,
        description="Interval between investment return passes in seconds",
    )
    scheduler_lock_backend: Literal["local", "redis"] = Field(
        default="local",
        description=(
            "Guard used for scheduler runs. 'local' is process-local only, "
            "'redis' adds a cross-instance lock"
        ),
    )
    scheduler_lock_timeout_seconds: int = Field(
        default=300,
        gt=0,
        description="TTL of the cross-instance scheduler lock",
    )
    health_check_port: int = Field(
        default=8081, ge=1, le=65535, description="Scheduler health server port"
    )

    # Redis (for distributed lock and Dramatiq)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Referral commission bootstrap defaults.
    # Used only when the corresponding site setting is absent.
    default_referral_bonus_percent: Decimal = Field(
        default=Decimal("10"),
        ge=0,
        description="Base referral commission percent",
    )
    default_referral_level_increment_percent: Decimal = Field(
        default=Decimal("5"),
        ge=0,
        description="Commission percent added per referral tier",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_production(self) -> "Settings":
        """Validate production-specific requirements."""
        if self.environment == "production":
            if self.debug:
                raise ValueError(
                    "DEBUG must be False in production environment. "
                    "Set DEBUG=false in your .env file."
                )
            if self.database_url.startswith("sqlite"):
                raise ValueError(
                    "SQLite is not supported in production. "
                    "Set DATABASE_URL to a PostgreSQL URL."
                )
        return self


settings = Settings()
