"""
Application Configuration — Environment & Settings
Centralizes all config from .env with Pydantic Settings for validation.
"""
from dataclasses import dataclass
from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings

# Resolve paths relative to backend/ directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- Core ---
    APP_NAME: str = "Customer Transaction History API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # --- Data Source ---
    DATA_SOURCE: str = "database"   # database | csv
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'data' / 'transactions.db'}"
    CSV_DIR: str = str(BASE_DIR / "data" / "exports")

    # --- Tables ---
    PAYMENTS_TABLE: str = "payments"
    ORDERS_TABLE: str = "orders"
    REFUNDS_TABLE: str = "refunds"

    # --- Lookup ---
    MAX_RESULTS: int = 50
    EXCLUDED_PAYMENT_STATUS: str = "failed"
    DEFAULT_CURRENCY: str = "INR"

    # --- Security ---
    CORS_ORIGINS: list[str] = ["*"]

    # --- Logging ---
    LOG_DIR: str = str(BASE_DIR / "logs")

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()


@dataclass(frozen=True)
class LookupConfig:
    """Everything the lookup pipeline needs to know about its tables."""

    payments_table: str = "payments"
    orders_table: str = "orders"
    refunds_table: str = "refunds"
    max_results: int = 50
    excluded_status: str = "failed"
    default_currency: str = "INR"

    @classmethod
    def from_settings(cls, settings: Settings) -> "LookupConfig":
        return cls(
            payments_table=settings.PAYMENTS_TABLE,
            orders_table=settings.ORDERS_TABLE,
            refunds_table=settings.REFUNDS_TABLE,
            max_results=settings.MAX_RESULTS,
            excluded_status=settings.EXCLUDED_PAYMENT_STATUS,
            default_currency=settings.DEFAULT_CURRENCY,
        )
