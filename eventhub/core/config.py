from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./eventhub.db"
    redis_url: str = "redis://localhost:6379/0"

    booking_lock_timeout_seconds: int = 10
    booking_lock_blocking_timeout_seconds: float = 5.0

    log_level: str = "INFO"
    auto_create_tables: bool = True
    celery_task_always_eager: bool = False

    # JSON file with {"words": {...}, "event_types": {...}}; built-in lexicon when unset
    mood_lexicon_path: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
