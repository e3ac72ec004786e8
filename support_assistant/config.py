from functools import lru_cache
from typing import List, Optional
import os

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Service information
    SERVICE_NAME: str = "support-assistant"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    # FastAPI configuration
    API_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    CORS_ORIGINS: List[str] = ["*"]

    # Intent store configuration
    INTENT_STORE_TYPE: str = "file"
    INTENT_CATALOG_PATH: Optional[str] = None
    INTENT_STORE_URL: Optional[str] = None
    INTENT_STORE_TIMEOUT: float = 10.0

    # Classifier configuration
    CLASSIFIER_REGULARIZATION: float = 10.0
    MODEL_EXPORT_PATH: Optional[str] = None

    # Lexical search configuration
    SEARCH_THRESHOLD: float = 0.4
    SEARCH_MIN_MATCH_LENGTH: int = 3
    SUGGESTION_LIMIT: int = 4

    # Session configuration
    SESSION_TTL_SECONDS: int = 3600

    # Logging configuration
    LOG_LEVEL: str = "INFO"

    @field_validator("INTENT_STORE_TYPE")
    @classmethod
    def validate_store_type(cls, v: str) -> str:
        """Validate that the intent store backend is supported."""
        v = v.lower()
        if v not in ("memory", "file", "http"):
            raise ValueError("INTENT_STORE_TYPE must be one of: memory, file, http")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the log level is a standard logging level name."""
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be a standard logging level")
        return v

    @field_validator("SEARCH_THRESHOLD")
    @classmethod
    def validate_search_threshold(cls, v: float) -> float:
        """Validate that the fuzzy search threshold is within [0, 1]."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("SEARCH_THRESHOLD must be between 0 and 1")
        return v


def load_env_file() -> None:
    """Load environment variables from .env file if it exists."""
    env_path = os.path.join(os.getcwd(), ".env")
    if os.path.exists(env_path):
        load_dotenv(dotenv_path=env_path)


@lru_cache
def get_settings() -> Settings:
    """
    Create and cache application settings.

    Returns:
        Settings: Application settings instance
    """
    load_env_file()
    return Settings()
