"""
Notes Service - Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a module-level `settings` object.
Who:   The application factory, the database layer, the client and the CLI.
When:  Loaded once at import time; `create_app()` also accepts an explicit
       Settings instance so tests can point at a throwaway database.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    Attributes are grouped by concern for readability.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: sqlite+aiosqlite:///<path>  (relative to the working directory)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./notes.db",
        description="Async SQLAlchemy URL of the notes database",
    )

    # What: Seconds a connection waits on a locked SQLite file before failing
    # Keeps every store operation bounded instead of blocking indefinitely
    db_busy_timeout: float = Field(default=5.0, ge=0.1, le=60.0)

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001, ge=1, le=65535)

    # What: Path prefix the notes router is mounted under (/api/notes)
    api_prefix: str = Field(default="/api")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (the Vite dev server by default)
    cors_origins: str = Field(default="http://localhost:5173")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Logging / Diagnostics ─────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # What: When True, 500 responses carry the original error text in `error`
    # Never enable in production: store errors can reveal schema details
    debug: bool = Field(default=False)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("api_prefix")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        """'/api/', 'api' and '/api' all mean the same mount point; '' mounts at root."""
        stripped = v.strip().strip("/")
        return f"/{stripped}" if stripped else ""

    # ── Client ────────────────────────────────────────────────────────────
    # What: Where NotesClient and the CLI find the API
    api_base_url: str = Field(default="http://localhost:3001")
    client_timeout: float = Field(default=10.0, gt=0, le=300)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATABASE_URL and database_url both work
        "extra": "ignore",
    }


# Process-wide configuration; immutable after startup
settings = Settings()
