"""
QA Extractor: Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a default `settings` object.
Who:   Passed to create_app(); the model client, normalizer and error
       handlers read their values from the instance they were built with.
When:  Loaded once at module import time; validated before the app serves.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Only GOOGLE_API_KEY has no usable default. Everything else can be left
    alone for local development.
    """

    # ── Google Gemini ─────────────────────────────────────────────────────
    # What: API key for Google Generative AI
    # Required: YES, startup aborts without it
    google_api_key: str = Field(
        default="",
        description="Google API key for the Gemini content-generation API",
    )

    # Options: gemini-1.5-flash (faster, cheaper), gemini-1.5-pro
    gemini_model: str = Field(default="gemini-1.5-flash")

    # ── Model Call Policy ─────────────────────────────────────────────────
    # What: Tenacity retry settings for the Gemini call
    # 1 = single attempt per request; raise to enable backoff retries
    model_max_attempts: int = Field(default=1, ge=1, le=10)
    model_retry_min_wait: int = Field(default=1, ge=0, le=30)
    model_retry_max_wait: int = Field(default=10, ge=1, le=120)

    # Seconds; None leaves the SDK default in place
    model_timeout: Optional[float] = Field(default=None, gt=0)

    # ── Image Normalization ───────────────────────────────────────────────
    # What: Longest side of the JPEG sent to the model ("fit inside" box)
    image_max_side: int = Field(default=1024, ge=64, le=8192)
    jpeg_quality: int = Field(default=90, ge=1, le=95)

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)

    # What: "development" adds stack traces to 500 response bodies
    environment: str = Field(default="production")

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

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        valid = {"development", "production", "test"}
        lower = v.lower()
        if lower not in valid:
            raise ValueError(f"Invalid environment '{v}'. Must be one of: {valid}")
        return lower

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # GOOGLE_API_KEY and google_api_key both work
        "extra": "ignore",
    }

    def validate_required(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called from the application lifespan before serving requests.
        Raises ValueError listing every missing setting.
        """
        errors = []
        if not self.google_api_key or self.google_api_key == "your_google_api_key_here":
            errors.append(
                "GOOGLE_API_KEY is not set. "
                "Get a key at https://aistudio.google.com/app/apikey"
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Default instance used by the module-level app and the CLI entry point
settings = Settings()
