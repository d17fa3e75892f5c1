"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    food_catalog_table: str = "foods"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    narrative_timeout_seconds: float = 20.0
    bmr_formula: str = "mifflin_st_jeor"
    plan_tolerance: float = 0.10
    max_foods_per_meal: int = 5
    renormalize_timing: bool = True
    validate_plans: bool = True
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
