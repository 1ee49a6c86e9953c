"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every knob has a default; the service runs with no environment at all
    - get_settings() is cached (lru_cache) — single instance per process
    - Core modules never read settings; they receive ValidationBounds

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - CORS_ORIGINS accepts a comma-separated string as well as a JSON list
"""

import json
from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from app.core.validate_fields import ValidationBounds


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    db_file_path: str = "./data/students.json"
    db_backup_path: str = "./data/backup/"

    # Server
    host: str = "0.0.0.0"
    port: int = 4000
    cors_origins: Annotated[list[str], NoDecode] = [
        "http://localhost:5173", "http://localhost:5174",
    ]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, v):
        """CORS_ORIGINS=http://a,http://b → ["http://a", "http://b"]."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Validation bounds
    max_name_length: int = 100
    min_age: int = 1
    max_age: int = 120
    max_course_length: int = 200

    # Pagination
    default_page_limit: int = 10
    max_page_limit: int = 100

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"
    log_dir: str = "./logs"

    def validation_bounds(self) -> ValidationBounds:
        return ValidationBounds(
            max_name_length=self.max_name_length,
            min_age=self.min_age,
            max_age=self.max_age,
            max_course_length=self.max_course_length,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
