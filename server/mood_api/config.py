"""Application configuration loaded from environment variables."""
import os
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database paths
    data_path: str = os.getenv("DATA_PATH", os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

    @property
    def mood_db_path(self) -> str:
        return os.path.join(self.data_path, "mood_tracker.db")

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8082
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # External language-risk provider (disabled without an API key)
    language_api_url: str = "https://api.openai.com/v1"
    language_api_key: Optional[str] = None
    language_model: str = "gpt-3.5-turbo"
    language_timeout: float = 30.0

    class Config:
        env_prefix = "MOOD_API_"


@lru_cache
def get_settings() -> Settings:
    return Settings()
