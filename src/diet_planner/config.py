"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from diet_planner.constants import CANDIDATE_POOL_LIMIT

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    spoonacular_api_key: str | None = None
    spoonacular_base_url: str = "https://api.spoonacular.com"
    candidate_pool_limit: int = CANDIDATE_POOL_LIMIT
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def spoonacular_enabled(self) -> bool:
        """Whether a usable Spoonacular key is configured."""
        key = (self.spoonacular_api_key or "").strip()
        return bool(key) and key != "your_spoonacular_api_key_here"
