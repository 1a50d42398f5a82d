"""Application configuration via pydantic-settings."""

from functools import lru_cache
from typing import Optional

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Champion meta directory; defaults to the bundled knowledge/ directory
    knowledge_dir: Optional[str] = None

    # Historical per-player match rows (CSV); empty disables history lookups
    match_stats_path: str = "data/match_stats.csv"

    recommendation_limit: int = 8

    # LLM Provider (OpenAI-compatible chat completions)
    enable_llm: bool = False
    llm_api_key: str = ""
    llm_api_url: str = "https://api.tokenfactory.us-central1.nebius.com/v1/chat/completions"
    llm_model: str = "deepseek-ai/DeepSeek-V3-0324-fast"
    llm_timeout: float = 15.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
