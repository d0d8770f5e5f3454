# woodshop/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Env vars (.env):
      - STORE_BACKEND: "supabase" (PostgREST) or "sql" (SQLModel engine)
      - SUPABASE_URL / SUPABASE_KEY (anon key) for the supabase backend
      - DATABASE_URL for the sql backend
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - SUPABASE_SERVICE_ROLE_KEY (bypasses RLS, backend only)
    """

    PROJECT_NAME: str = "Woodshop Storefront API"
    API_V1_STR: str = "/api/v1"

    STORE_BACKEND: Literal["supabase", "sql"] = "supabase"

    # Supabase / DB config
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    DATABASE_URL: str | None = None

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str | None = None
    SUPABASE_JWT_ALG: str = "HS256"

    # Cart sessions live in process memory only
    CART_SESSION_HEADER: str = "X-Cart-Session"
    CART_IDLE_MINUTES: int = 120
    CART_MAX_SESSIONS: int = 10_000

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
