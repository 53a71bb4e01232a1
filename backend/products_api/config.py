"""
Products API - Application Configuration
========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py; handlers read the copy stored on `app.state`.
When:  Loaded once at module import time; validated before the app starts.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development. API_KEY
    has to be set for any create/update/delete request to succeed.
    """

    # ── Authentication ────────────────────────────────────────────────────
    # What: Shared secret that mutating requests must present
    # Empty: every POST/PUT/DELETE is rejected with 401
    api_key: str = Field(default="", description="Shared secret for write operations")

    # What: Request header carrying the shared secret
    api_key_header: str = Field(default="X-API-Key")

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # What: Controls verbosity of application logging
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

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated origins, "*" allows any
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Pagination ────────────────────────────────────────────────────────
    default_page_limit: int = Field(default=10, ge=1, le=1000)
    max_page_limit: int = Field(default=100, ge=1, le=1000)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # API_KEY and api_key both work
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Checks each required field and raises ValueError with guidance.
        """
        errors = []
        if not self.api_key:
            errors.append(
                "API_KEY is not set. Create, update and delete requests "
                "will be rejected with 401 until it is configured."
            )
        if self.default_page_limit > self.max_page_limit:
            errors.append(
                f"DEFAULT_PAGE_LIMIT ({self.default_page_limit}) exceeds "
                f"MAX_PAGE_LIMIT ({self.max_page_limit})."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance used when create_app() is called without overrides
settings = Settings()
