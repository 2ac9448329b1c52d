"""
Configuration settings for pocketlearn.

Uses Pydantic Settings for environment variable management with .env file support.
The backend variables also accept the EXPO_PUBLIC_* names used by the mobile app
so both clients can share one .env file.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from pocketlearn.core.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ========================================
    # Backend (record store)
    # ========================================
    db_host: str = Field(
        default="",
        validation_alias=AliasChoices("DB_HOST", "EXPO_PUBLIC_DB_HOST"),
        description="Base URL of the record store, e.g. https://pb.example.com",
    )
    db_user: str = Field(
        default="",
        validation_alias=AliasChoices("DB_USER", "EXPO_PUBLIC_DB_USER"),
        description="Principal (service account identity) used for authentication",
    )
    db_pass: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("DB_PASS", "EXPO_PUBLIC_DB_PASS"),
        description="Secret for the service account",
    )
    auth_path: str = Field(
        default="/api/admins/auth-with-password",
        description="Authentication endpoint (newer servers: /api/collections/_superusers/auth-with-password)",
    )

    # ========================================
    # Retrieval
    # ========================================
    page_size: int = Field(
        default=200,
        ge=1,
        description="Records requested per page when listing a collection",
    )
    max_records: int = Field(
        default=200,
        ge=1,
        description="Hard cap on records returned by one collection fetch",
    )
    request_timeout: float | None = Field(
        default=None,
        description="Per-request HTTP timeout in seconds (None disables it)",
    )
    token_leeway_seconds: int = Field(
        default=30,
        ge=0,
        description="Treat the token as expired this many seconds before its exp claim",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    def missing_backend_settings(self) -> list[str]:
        """Return the names of required backend variables that are unset."""
        missing = []
        if not self.db_host.strip():
            missing.append("DB_HOST")
        if not self.db_user.strip():
            missing.append("DB_USER")
        if not self.db_pass.get_secret_value():
            missing.append("DB_PASS")
        return missing

    def require_backend(self) -> Settings:
        """Fail fast when the backend host or credentials are not configured."""
        missing = self.missing_backend_settings()
        if missing:
            raise ConfigError(
                f"Environment variables {', '.join(missing)} must be defined "
                "(EXPO_PUBLIC_* names are accepted too)."
            )
        if not self.db_host.strip().lower().startswith(("http://", "https://")):
            raise ConfigError(f"DB_HOST must be an http:// or https:// URL, got {self.db_host!r}")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
