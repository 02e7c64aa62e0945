# backend/panelera/core/settings.py
"""
Panelera - Configuration Management with pydantic-settings

- Loads from environment and root .env
- Validates and normalizes values
- Cached singleton via get_settings()
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional, List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# backend/panelera/core/settings.py -> <repo>/.env
_ENV_FILE = Path(__file__).resolve().parent.parent.parent.parent / ".env"

class Settings(BaseSettings):
    """
    Application settings with validation.

    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===================
    # Application Settings
    # ===================
    PROJECT_NAME: str = "Panelera"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = Field(default=False, description="Enable debug mode")
    ENVIRONMENT: str = Field(default="development", description="Deployment environment")

    # ===================
    # Database Settings
    # ===================
    DB_HOST: str = Field(default="localhost", description="PostgreSQL host")
    DB_PORT: int = Field(default=5432, description="PostgreSQL port")
    DB_NAME: str = Field(default="panelera", description="Database name")
    DB_USER: str = Field(default="postgres", description="Database user")
    DB_PASSWORD: str = Field(default="postgres", description="Database password")
    DATABASE_URL: Optional[str] = Field(
        default=None, description="Full database URL (overrides DB_* settings)"
    )

    @property
    def database_url(self) -> str:
        """Build PostgreSQL database URL from components or use explicit URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    # ===================
    # Security Settings
    # ===================
    SECRET_KEY: str = Field(
        default="change-this-to-a-random-secret-key-in-production",
        description="JWT signing key - MUST change in production",
    )
    ALGORITHM: str = Field(default="HS256", description="JWT signing algorithm")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=30, description="JWT token expiration in minutes"
    )

    @field_validator("SECRET_KEY")
    @classmethod
    def warn_default_secret(cls, v: str) -> str:
        """Fail in prod if default secret; warn in dev."""
        if "change-this" in v.lower():
            import warnings
            import os

            if os.getenv("ENVIRONMENT", "development").lower() == "production":
                raise ValueError(
                    "Default SECRET_KEY detected in production. Set a secure SECRET_KEY."
                )
            warnings.warn(
                "WARNING: Using default SECRET_KEY. Do not use this in production.",
                UserWarning,
                stacklevel=2,
            )
        return v

    # ===================
    # CORS Settings
    # ===================
    ALLOWED_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Allowed CORS origins",
    )

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # ===================
    # Logging
    # ===================
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text
    LOG_FILE: Optional[str] = None

    # Query monitor thresholds (seconds)
    SLOW_QUERY_THRESHOLD: float = 1.0
    WARN_QUERY_THRESHOLD: float = 0.5

    # ===================
    # Analytics
    # ===================
    REPORT_LOCALE: str = Field(default="es", description="Label locale: es or en")
    DEFAULT_MONTHS_BACK: int = 6
    MIN_MONTHS_BACK: int = 3
    MAX_MONTHS_BACK: int = 12
    ANALYTICS_STRICT_MONTHS_BACK: bool = Field(
        default=False,
        description="Reject months_back outside the window instead of clamping it",
    )
    ANALYTICS_ADMIN_ONLY: bool = Field(
        default=False, description="Restrict analytics reports to ADMIN users"
    )
    ANALYTICS_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)
    ANALYTICS_MAX_CONCURRENT_READS: int = Field(default=8, ge=1)
    SUPPLIER_RANKING_LIMIT: Optional[int] = Field(default=10, ge=1)
    OPERATOR_RANKING_LIMIT: Optional[int] = Field(default=None, ge=1)

    @field_validator("REPORT_LOCALE")
    @classmethod
    def normalize_locale(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("es", "en"):
            raise ValueError("REPORT_LOCALE must be 'es' or 'en'")
        return v

    @model_validator(mode="after")
    def check_months_window(self):
        if self.MIN_MONTHS_BACK > self.MAX_MONTHS_BACK:
            raise ValueError("MIN_MONTHS_BACK must not exceed MAX_MONTHS_BACK")
        return self

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

@lru_cache
def get_settings() -> Settings:
    """Singleton settings loader (cached)."""
    return Settings()

# Convenience alias used at import time by the app modules
settings = get_settings()
