"""Application configuration using Pydantic Settings."""

import os
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _is_test_environment() -> bool:
    """Check if we're running in a test environment."""
    return (
        os.environ.get("ENVIRONMENT", "").lower() == "test"
        or "PYTEST_CURRENT_TEST" in os.environ
        or "pytest" in os.environ.get("_", "")
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = (
        "sqlite+aiosqlite:///:memory:"
        if _is_test_environment()
        else "sqlite+aiosqlite:///./resume_review.db"
    )

    # JWT - access and refresh tokens are signed with independent keys
    JWT_ACCESS_SECRET_KEY: str = (
        "test-access-secret-change-in-production" if _is_test_environment() else ""
    )
    JWT_REFRESH_SECRET_KEY: str = (
        "test-refresh-secret-change-in-production" if _is_test_environment() else ""
    )
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Work factor shared by password and refresh-token hashing
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    # Review workflow
    RESUME_STATUSES: str = Field(
        default="SUBMITTED,UNDER_REVIEW,INTERVIEW,OFFERED,REJECTED",
        description="Comma-separated whitelist of resume statuses; the first is the initial status",
    )

    @property
    def resume_statuses_list(self) -> List[str]:
        """Parse resume statuses string into list."""
        return [s.strip() for s in self.RESUME_STATUSES.split(",") if s.strip()]

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8080,http://localhost:5173"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    # Application
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


settings = Settings()
