from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime configuration. Every field can be overridden with a
    SCHOOL_-prefixed environment variable or a .env file.
    """

    app_title: str = "School Finance Dashboard"

    # --- Database ---
    database_url: str = "sqlite:///./school.db"
    sql_echo: bool = False
    db_timeout_seconds: float = 5.0

    # --- Logging ---
    log_level: str = "INFO"

    # --- HTTP ---
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Shared secret checked by the staff gate; None disables the gate
    staff_token: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="SCHOOL_",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
