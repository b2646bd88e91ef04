"""Application configuration and environment variables."""
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Bookshelf API"
    version: str = "1.0.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Backing JSON file; relative paths resolve against the working directory
    books_file: Path = Path("books.json")

    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
