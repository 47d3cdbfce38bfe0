"""Application settings using pydantic-settings."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PROVIDERS = [
    "mistralai/Mistral-7B-Instruct-v0.3",
    "microsoft/DialoGPT-medium",
    "google/flan-t5-large",
    "facebook/blenderbot-400M-distill",
    "bigscience/bloom-560m",
]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Application
    # ==========================================================================
    app_name: str = "study-plan-generator"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # Database
    # ==========================================================================
    database_url: str = "sqlite+aiosqlite:///./study_plans.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10
    create_tables: bool = True

    # ==========================================================================
    # Model Providers
    # ==========================================================================
    # Hugging Face inference
    hf_api_key: str = Field(default="")
    hf_base_url: str = "https://router.huggingface.co/hf-inference/models"

    # OpenAI-compatible chat completions, used for "chat:<model>" provider ids
    chat_api_key: str = Field(default="")
    chat_base_url: str = "https://api.deepseek.com"

    provider_timeout_seconds: float = 120.0

    # Tried in this order, first acceptable response wins
    providers: list[str] = Field(default_factory=lambda: list(DEFAULT_PROVIDERS))

    # ==========================================================================
    # Generation
    # ==========================================================================
    min_acceptable_length: int = 100
    max_new_tokens: int = 2000
    temperature: float = 0.7
    top_p: float = 0.95
    repetition_penalty: float = 1.15
    do_sample: bool = True

    # ==========================================================================
    # API
    # ==========================================================================
    recent_plans_limit: int = 50
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=3001, validation_alias=AliasChoices("api_port", "port"))
    cors_origins: list[str] = Field(default=["*"])


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
