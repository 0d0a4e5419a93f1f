"""Application configuration. Loads from env vars."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings. Override via environment variables."""

    # Chunking: a speaker's open chunk commits after this much caption silence.
    CHUNK_GRACE_MS: int = 2000

    # Display name used when the caption source has none (never blocks chunk creation).
    SPEAKER_PLACEHOLDER: str = " "

    # Reset keeps last-seen caption text per speaker unless this is enabled, so the first
    # post-reset caption matching a speaker's last pre-reset caption is dropped as a duplicate.
    RESET_CLEARS_LAST_SEEN: bool = False

    # In-memory sessions (one aggregator each). Oldest is evicted past this cap.
    MAX_SESSIONS: int = 64

    # Logging: level (DEBUG, INFO, WARNING, ERROR); file path = also write logs there (empty = console only).
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""  # e.g. "logs/captions.log"

    class Config:
        env_file = ".env"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
