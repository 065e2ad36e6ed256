# storefront/core/config.py
from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Supabase Postgres connection string)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - SUPABASE_URL (only used in logs / health output)
      - CORS_ORIGINS (JSON list)
      - LOG_LEVEL
      - TAX_RATE / SHIPPING_COST / FREE_SHIPPING_THRESHOLD (checkout quote)
    """

    PROJECT_NAME: str = "Storefront API"
    API_V1_STR: str = "/api/v1"

    # Supabase / DB config
    SUPABASE_URL: str | None = None
    DATABASE_URL: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    LOG_LEVEL: str = "INFO"

    # Checkout quote (display only, never stored on the order)
    TAX_RATE: Decimal = Decimal("0.08")
    SHIPPING_COST: Decimal = Decimal("9.99")
    FREE_SHIPPING_THRESHOLD: Decimal = Decimal("50")

    FEATURED_PRODUCTS_LIMIT: int = 8

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
