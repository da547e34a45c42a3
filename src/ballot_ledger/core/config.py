"""
Ledger configuration using Pydantic Settings.

All configuration is loaded from environment variables or a local .env file.
"""

from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

REPOSITORY_BACKENDS = ("memory",)
COLLABORATOR_BACKENDS = ("http", "static")


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Ledger settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "BallotLedger"  # stamped on every log event

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # JSON lines in production, console renderer otherwise

    # Storage
    REPOSITORY_BACKEND: str = "memory"

    # External collaborators (election admin, eligibility registry, token service)
    COLLABORATOR_BACKEND: str = "http"
    COLLABORATOR_TIMEOUT_SECONDS: float = 5.0
    COLLABORATOR_API_KEY: str | None = None

    # Static collaborator backend (local development and tests)
    # Comma-separated; empty STATIC_ACTIVE_ELECTIONS means every election is active
    STATIC_ELIGIBLE_VOTERS: str = ""
    STATIC_ACTIVE_ELECTIONS: str = ""

    @field_validator("REPOSITORY_BACKEND")
    @classmethod
    def validate_repository_backend(cls, v: str) -> str:
        """Validate that the repository backend is known."""
        if v not in REPOSITORY_BACKENDS:
            raise ValueError(f"REPOSITORY_BACKEND must be one of {REPOSITORY_BACKENDS}")
        return v

    @field_validator("COLLABORATOR_BACKEND")
    @classmethod
    def validate_collaborator_backend(cls, v: str) -> str:
        """Validate that the collaborator backend is known."""
        if v not in COLLABORATOR_BACKENDS:
            raise ValueError(f"COLLABORATOR_BACKEND must be one of {COLLABORATOR_BACKENDS}")
        return v

    @field_validator("COLLABORATOR_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float, info: Any) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return v

    @property
    def static_eligible_voters_list(self) -> list[str]:
        """Get the statically eligible voters as a list."""
        return _split_csv(self.STATIC_ELIGIBLE_VOTERS)

    @property
    def static_active_elections_list(self) -> list[int] | None:
        """Get the statically active elections, or None when all are active."""
        items = _split_csv(self.STATIC_ACTIVE_ELECTIONS)
        if not items:
            return None
        return [int(item) for item in items]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
