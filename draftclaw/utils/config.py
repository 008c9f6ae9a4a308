"""Configuration and settings management."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator
from pathlib import Path

class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Draft storage
    STORE_DB_PATH: str = "data/draft.db"
    RUNTIME_DATA_PATH: str = "data/runtime_data.json"

    # Static card data
    CARD_DATA_PATH: str = "resource/eternal-cards.json"
    CARD_RATING_PATH: str = "resource/card_rating.txt"
    CARD_RATING_FORMAT: str = "14.0"

    # Screenshot uploads
    IMGUR_CLIENT_ID: Optional[str] = None
    UPLOAD_TIMEOUT_S: float = 30.0

    # Capture loop
    POLL_INTERVAL_S: float = 1.0
    LENIENT_OBSERVATION: bool = False

    @field_validator('IMGUR_CLIENT_ID', mode='before')
    @classmethod
    def validate_client_id(cls, v):
        """Convert empty/whitespace strings to None."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        """Convert empty/whitespace strings to default."""
        if isinstance(v, str) and not v.strip():
            return "INFO"
        return v

    @field_validator('STORE_DB_PATH', mode='before')
    @classmethod
    def validate_store_path(cls, v):
        """Convert empty/whitespace strings to default."""
        if isinstance(v, str) and not v.strip():
            return "data/draft.db"
        return v

    @field_validator('RUNTIME_DATA_PATH', mode='before')
    @classmethod
    def validate_runtime_path(cls, v):
        """Convert empty/whitespace strings to default."""
        if isinstance(v, str) and not v.strip():
            return "data/runtime_data.json"
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

# Global settings instance
settings = Settings()

def ensure_data_dirs():
    """Ensure the directories holding the store and runtime data exist."""
    for path in (settings.STORE_DB_PATH, settings.RUNTIME_DATA_PATH):
        Path(path).parent.mkdir(parents=True, exist_ok=True)

def resolve_card_data_path() -> Path:
    """Get the card data file, failing early with an install hint."""
    path = Path(settings.CARD_DATA_PATH)
    if path.exists():
        return path

    raise FileNotFoundError(
        f"Card data not found at {path}. Set CARD_DATA_PATH to the Eternal card JSON export."
    )
