"""
Configuration management for the Agrofix storefront.

Loads settings from .env via pydantic-settings.

Notes:
    - admin_secret is the shared admin password exchanged for a signed token
    - validate_production_settings() enforces strict CORS and real secrets in production
"""
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Database ────────────────────────────────────────────────────
    database_url: str = "sqlite:///./data/agrofix.db"

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"
    log_level: str = "INFO"

    # ── Admin auth ──────────────────────────────────────────────────
    admin_secret: str = ""
    jwt_secret: str = ""
    jwt_issuer: str = "agrofix-api"
    admin_token_ttl_minutes: int = 12 * 60

    # Login attempts allowed per client IP per window
    admin_auth_max_attempts: int = 10
    admin_auth_window_seconds: int = 60

    # ── Client ──────────────────────────────────────────────────────
    storefront_api_url: str = "http://127.0.0.1:8000"

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def async_database_url(self) -> str:
        """Database URL with the async sqlite driver swapped in."""
        if self.database_url.startswith("sqlite:///"):
            return self.database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return self.database_url

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup. In production a misconfiguration is fatal;
        elsewhere it is only logged.
        """
        if self.environment == "production":
            if "*" in self.cors_origins:
                raise ValueError(
                    "CORS_ORIGINS must not contain '*' in production. "
                    "Set explicit allowed origins."
                )
            if not self.admin_secret:
                raise ValueError("ADMIN_SECRET must be set in production.")
            if not self.jwt_secret:
                raise ValueError(
                    "JWT_SECRET must be set in production. "
                    "It is used to sign admin access tokens."
                )
            logger.info("Production settings validated")
        else:
            warnings = []
            if not self.admin_secret:
                warnings.append("ADMIN_SECRET is empty (admin login disabled)")
            if not self.jwt_secret:
                warnings.append("JWT_SECRET is empty (admin tokens cannot be issued)")
            if "*" in self.cors_origins:
                warnings.append("CORS_ORIGINS contains '*' (open access)")
            for w in warnings:
                logger.warning(w)


# Global settings instance
settings = Settings()
