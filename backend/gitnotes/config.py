"""
GitNotes Backend — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types, and provides a `settings` object.
Who:   Built once by the application factory and handed to every component
       that needs it (repository client, content filter, routes).
When:  Loaded once at module import time; validated before the app starts.

Design Decision:
    Components receive the Settings instance through their constructor instead
    of importing the module-level object themselves. Tests build their own
    Settings with fake secrets and never touch the environment of the process.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Secrets default to empty strings so the app can boot (and report the
    problem) without them. Operations that need a missing secret raise
    ConfigurationError before touching the network.
    """

    # ── GitHub Repository (note storage) ──────────────────────────────────
    # What: Owner/repository pair whose contents API stores the notes
    github_owner: str = Field(default="hiplitewhat")
    github_repo: str = Field(default="notes-app")

    # What: Branch every note file is committed to
    github_branch: str = Field(default="main")

    # What: Directory inside the repository holding one JSON file per note
    github_notes_dir: str = Field(default="notes")
    note_file_suffix: str = Field(default=".json")

    github_api_url: str = Field(default="https://api.github.com")

    # What: Client-identifying User-Agent (GitHub rejects requests without one)
    user_agent: str = Field(default="notes-app-worker")

    # What: Personal access token with contents:write on the repository
    # Required: YES for creating notes
    github_token: str = Field(
        default="",
        description="GitHub token used for the contents API",
    )

    # ── Google Gemini (content filter) ────────────────────────────────────
    gemini_api_key: str = Field(
        default="",
        description="Google Gemini API key for note filtering",
    )
    gemini_model: str = Field(default="gemini-2.0-flash")

    # What: Route note text through Gemini before storage
    # When False: the identity filter is wired and no Gemini call is made
    content_filter_enabled: bool = Field(default=True)

    # ── Outbound HTTP ─────────────────────────────────────────────────────
    # What: Timeout in seconds for GitHub calls; None waits indefinitely
    upstream_timeout: Optional[float] = Field(default=None, gt=0)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # What: Serve /docs, /redoc and /openapi.json
    # Off by default: every path outside the note routes answers "Not Found"
    expose_api_docs: bool = Field(default=False)

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

    @field_validator("github_notes_dir")
    @classmethod
    def strip_notes_dir(cls, v: str) -> str:
        """Stores the directory without leading/trailing slashes."""
        return v.strip("/")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that the required secrets are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every missing secret and raises one ValueError.
        """
        errors = []
        if not self.github_token:
            errors.append(
                "GITHUB_TOKEN is not set. "
                "Create a token with contents:write access on "
                f"{self.github_owner}/{self.github_repo}"
            )
        if self.content_filter_enabled and not self.gemini_api_key:
            errors.append(
                "GEMINI_API_KEY is not set. "
                "Get a key at https://aistudio.google.com/app/apikey "
                "or set CONTENT_FILTER_ENABLED=false"
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
