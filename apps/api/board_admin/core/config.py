"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Deployment configuration loaded from ``SUPABASE_*`` environment variables.

    Connection fields are optional here so a missing value is reported per
    request as a configuration error instead of failing application startup.
    """

    url: str | None = None
    anon_key: str | None = None
    service_role_key: str | None = None
    store_backend: Literal["rest", "memory"] = "rest"

    model_config = SettingsConfigDict(env_prefix="SUPABASE_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
