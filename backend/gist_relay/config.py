"""
Gist Relay — Application Configuration
=======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Read by the application factory, which injects the values into the
       gist service at construction time.
When:  Loaded once at module import time; validated before the app starts.

The only secret is GITHUB_TOKEN. Without it the relay still serves GET
(raw content is unauthenticated) but refuses to create gists.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development except the
    GitHub token, which has to be issued out-of-band.
    """

    # ── GitHub ────────────────────────────────────────────────────────────
    # What: Static access token used to authenticate gist creation
    # Required: only for POST traffic; needs the `gist` scope
    github_token: Optional[str] = Field(
        default=None,
        description="GitHub personal access token with the gist scope",
    )

    # What: REST API base for the authenticated create call
    github_api_url: str = Field(default="https://api.github.com")

    # What: Base of the unauthenticated raw-content endpoint
    # Format: {gist_raw_base_url}/{owner}/{gist_id}/raw
    gist_raw_base_url: str = Field(default="https://gist.githubusercontent.com")

    # What: Transport timeout for both upstream calls, in seconds
    gist_timeout_seconds: float = Field(default=10.0, gt=0, le=120)

    # ── CORS ──────────────────────────────────────────────────────────────
    # What: Notebook frontend origins allowed to call the relay
    # Format: Comma-separated URLs
    cors_origins: str = Field(default="http://localhost:5173,http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    # Port 3030 is where the notebook dev server proxies /api to
    backend_host: str = Field(default="127.0.0.1")
    backend_port: int = Field(default=3030, ge=1024, le=65535)

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

    @field_validator("github_token")
    @classmethod
    def blank_token_is_missing(cls, v: Optional[str]) -> Optional[str]:
        """An empty GITHUB_TOKEN= line in .env counts as not configured."""
        if v is None or not v.strip():
            return None
        return v.strip()

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # GITHUB_TOKEN and github_token both work
        "extra": "ignore",
    }

    @property
    def gist_sharing_configured(self) -> bool:
        return self.github_token is not None

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Checks each required field and raises ValueError with guidance.
        """
        errors = []
        if not self.gist_sharing_configured:
            errors.append(
                "GITHUB_TOKEN is not set. Creating shared notebooks is disabled. "
                "Create a token with the `gist` scope at https://github.com/settings/tokens"
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance — used when create_app() is called without explicit settings
settings = Settings()
