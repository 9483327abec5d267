"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # SQLite file next to the app by default; Postgres for shared deployments
    DATABASE_URL: str = "sqlite:///./energy_db.sqlite"
    # Create missing tables on startup. Disable when schema is managed by Alembic.
    DB_AUTO_CREATE: bool = True

    # Session cookie carrying the opaque session token
    SESSION_COOKIE_NAME: str = "energy_session"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_COOKIE_SAMESITE: Literal["lax", "strict", "none"] = "lax"

    # Bcrypt cost (rounds)
    BCRYPT_ROUNDS: int = 12

    # Seed admin created at startup when no user with ADMIN_EMAIL exists
    ADMIN_BOOTSTRAP_ENABLED: bool = True
    ADMIN_EMAIL: str = "admin@energy.com"
    ADMIN_USERNAME: str = "Admin"
    ADMIN_PASSWORD: SecretStr = SecretStr("Admin@123")
    ADMIN_LOCATION: str = "Head Office"

    # Browser origins allowed to send the session cookie cross-site
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:3001"]

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL "
                "(e.g. sqlite:///./energy_db.sqlite or postgresql+psycopg2://...)"
            )
        return v.strip()

    @field_validator("SESSION_COOKIE_NAME")
    @classmethod
    def validate_session_cookie_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SESSION_COOKIE_NAME must be set and non-empty")
        return v.strip()

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @field_validator("ADMIN_EMAIL")
    @classmethod
    def validate_admin_email(cls, v: str) -> str:
        if not v or "@" not in v:
            raise ValueError("ADMIN_EMAIL must be a valid email address")
        return v.strip()

    @field_validator("ADMIN_PASSWORD")
    @classmethod
    def validate_admin_password(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) < 6:
            raise ValueError("ADMIN_PASSWORD must be at least 6 characters long")
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
