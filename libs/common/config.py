from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "test", "development", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    TIMEZONE: str = "Europe/Moscow"

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Telegram (admin notifications)
    BOT_TOKEN: str = ""
    TELEGRAM_API_URL: str = "https://api.telegram.org"
    ADMIN_CHAT_IDS: str = ""
    NOTIFICATION_TIMEOUT: float = 10.0

    # Loyalty programme
    POINTS_REDEEM_CAP_PERCENT: int = 15
    CASHBACK_RATE: float = 0.0  # opt-in, e.g. 0.05 for 5% of the amount paid
    WELCOME_POINTS: int = 500
    REFERRAL_CODE_PREFIX: str = "REF-"

    # Admin
    ADMIN_ORDERS_PAGE_SIZE: int = 50
    WIZARD_SESSION_TTL_MINUTES: int = 60

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
            if v.startswith("postgres://"):
                return v.replace("postgres://", "postgresql+psycopg://", 1)
        return v

    @field_validator("CASHBACK_RATE")
    @classmethod
    def validate_cashback_rate(cls, v: float) -> float:
        if v < 0 or v > 1:
            raise ValueError("CASHBACK_RATE must be between 0 and 1")
        return v

    @property
    def admin_ids(self) -> list[str]:
        """Admin chat ids parsed from the comma-separated ADMIN_CHAT_IDS."""
        return [part.strip() for part in self.ADMIN_CHAT_IDS.split(",") if part.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
