"""
Mongo API — Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the logging setup and the entrypoint.
When:  Loaded once at module import time.

The defaults reproduce the service's historical fixed deployment:
a local MongoDB at mongodb://localhost:27017, database "mydb",
collection "users", GridFS bucket "fs", HTTP on port 8080.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── MongoDB ───────────────────────────────────────────────────────────
    # Format: mongodb://[user:password@]host[:port][/?options]
    mongo_url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string",
    )
    mongo_database: str = Field(default="mydb")
    users_collection: str = Field(default="users")

    # What: GridFS bucket holding uploaded images (<bucket>.files / <bucket>.chunks)
    images_bucket: str = Field(default="fs")

    # What: How long the driver waits for a reachable server before failing an operation
    mongo_server_selection_timeout_ms: int = Field(default=5000, ge=100, le=60000)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated values (parsed by the *_list properties below)
    cors_allow_origins: str = Field(default="*")
    cors_allow_methods: str = Field(default="GET,HEAD,POST,PUT,OPTIONS")
    cors_allow_headers: str = Field(default="Content-Type")

    @property
    def cors_origins_list(self) -> List[str]:
        return _split_csv(self.cors_allow_origins)

    @property
    def cors_methods_list(self) -> List[str]:
        return [method.upper() for method in _split_csv(self.cors_allow_methods)]

    @property
    def cors_headers_list(self) -> List[str]:
        return _split_csv(self.cors_allow_headers)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # MONGO_URL and mongo_url both work
    }


# Singleton instance used when create_app() is called without explicit settings
settings = Settings()
