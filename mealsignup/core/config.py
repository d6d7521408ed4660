# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration: all env-driven, zero hardcode.
Single source of truth for every tunable parameter.
"""

import os


def _int_list(raw: str) -> list[int]:
    return [int(part) for part in raw.split(",") if part.strip()]


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "meal-signup-service")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8005"))

    DATABASE_URL: str = os.getenv(
        "DATABASE_URL", "sqlite+aiosqlite:///./meal_signup.db"
    )
    POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))
    AUTO_CREATE_SCHEMA: bool = (
        os.getenv("AUTO_CREATE_SCHEMA", "true").lower() == "true"
    )

    # 0=Sunday .. 6=Saturday
    DEFAULT_DAYS_OF_WEEK: list[int] = _int_list(
        os.getenv("DEFAULT_DAYS_OF_WEEK", "1,2,3,4,5,6")
    )
    DEFAULT_GUEST_COUNT: int = int(os.getenv("DEFAULT_GUEST_COUNT", "2"))
    MAX_CALENDAR_DAYS: int = int(os.getenv("MAX_CALENDAR_DAYS", "370"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    SEED_DEFAULT_TEAMS: bool = (
        os.getenv("SEED_DEFAULT_TEAMS", "true").lower() == "true"
    )


settings = Settings()
