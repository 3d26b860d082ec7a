"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    food_catalog_path: str = "data/macro.csv"
    recipes_path: str = "data/recipes.json"
    embedding_provider: Literal["openai", "http", "none"] = "openai"
    embedding_api_key: str | None = None
    embedding_base_url: str | None = None
    embedding_model: str = "text-embedding-3-small"
    embedding_api_key_header: str = "Authorization"
    embedding_timeout_seconds: float = 10.0
    embedding_query_prefix: str = ""
    embedding_document_prefix: str = ""
    lexical_threshold: int = 70
    semantic_threshold: float = 0.75
    candidate_limit: int = 50
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def semantic_enabled(self) -> bool:
        """Whether an embedding provider is configured."""
        if self.embedding_provider == "none" or not self.embedding_api_key:
            return False
        return self.embedding_provider == "openai" or bool(self.embedding_base_url)
