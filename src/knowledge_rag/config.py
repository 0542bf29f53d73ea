"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from knowledge_rag.errors import ConfigurationError

# Env var name for every field that must be set before the server starts.
REQUIRED_ENV_VARS: dict[str, str] = {
    "google_api_key": "GOOGLE_API_KEY",
}


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Google Generative AI (embeddings + chat)
    google_api_key: str = Field(default="", description="Credential for embedding and chat calls")
    embedding_model: str = "models/text-embedding-004"
    embedding_dim: int = Field(default=768, gt=0)
    chat_model: str = "gemini-1.5-flash"
    chat_temperature: float = 0.0

    # Vector store
    qdrant_url: str = "http://localhost:6333"
    qdrant_api_key: str = ""
    qdrant_collection: str = "chaicode-collection"
    qdrant_timeout: int = Field(default=30, gt=0, description="Per-request Qdrant timeout in seconds")

    # Chunking / retrieval
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)
    retrieval_k: int = Field(default=5, gt=0)
    score_threshold: float | None = None
    embed_batch_size: int = Field(default=64, gt=0)

    # Serving
    host: str = "0.0.0.0"
    port: int = 3000
    max_upload_bytes: int = 10 * 1024 * 1024
    log_level: str = "INFO"

    # Wall-clock budgets per endpoint, in seconds
    upload_timeout: float = 60.0
    text_timeout: float = 25.0
    scrape_timeout: float = 60.0
    chat_timeout: float = 30.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def missing_required(self) -> list[str]:
        """Return the env var names of required settings that are empty."""
        return [env for field, env in REQUIRED_ENV_VARS.items() if not getattr(self, field)]

    def validate_required(self) -> Settings:
        """Raise :class:`ConfigurationError` naming every missing variable."""
        missing = self.missing_required()
        if missing:
            raise ConfigurationError(missing)
        if self.chunk_overlap >= self.chunk_size:
            raise ConfigurationError(
                [],
                message=(
                    f"CHUNK_OVERLAP ({self.chunk_overlap}) must be smaller "
                    f"than CHUNK_SIZE ({self.chunk_size})"
                ),
            )
        return self


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Read and validate settings once per process."""
    return Settings().validate_required()
