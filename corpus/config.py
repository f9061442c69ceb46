"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings

from corpus.services.loader import ErrorPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False
    environment: str = "development"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:1313",
        "http://localhost:3000",
    ]

    # Content
    content_dir: str = "content"
    content_extensions: list[str] = [".md", ".markdown"]

    # What to do with a document whose front matter is broken:
    # "fail" aborts the whole listing, "skip" logs a warning and drops it
    corpus_on_error: ErrorPolicy = ErrorPolicy.FAIL

    # Serve documents dated in the future
    include_future: bool = False

    # Seconds a loaded corpus is served before the directory is re-scanned
    corpus_cache_ttl: float = 60

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
