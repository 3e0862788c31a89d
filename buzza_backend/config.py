"""Application settings using Pydantic BaseSettings."""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_ACTIVITY_PAGE_SIZE = 100


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    environment: str = Field(default="development")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    cors_origins: str = Field(default="")

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./buzza_dev.db")
    database_echo: bool = Field(default=False)
    # None means "environment-based default": create tables outside production.
    auto_create_tables: Optional[bool] = Field(default=None)

    # Request handling
    query_timeout_seconds: float = Field(default=5.0)
    activity_page_size: int = Field(default=MAX_ACTIVITY_PAGE_SIZE)

    # Authentication
    session_cookie_name: str = Field(default="buzza_session")

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        vv = (v or "").strip().lower()
        if vv not in {"development", "staging", "production", "test"}:
            raise ValueError("ENVIRONMENT must be one of: development, staging, production, test")
        return vv

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: str) -> str:
        origins = [o.strip() for o in (v or "").split(",") if o.strip()]
        if "*" in origins:
            raise ValueError("CORS_ORIGINS must not include wildcard '*'")
        return v

    @model_validator(mode="after")
    def validate_cross_field_constraints(self) -> "Settings":
        if self.query_timeout_seconds <= 0:
            raise ValueError("QUERY_TIMEOUT_SECONDS must be positive")
        if not (1 <= self.activity_page_size <= MAX_ACTIVITY_PAGE_SIZE):
            raise ValueError(
                f"ACTIVITY_PAGE_SIZE must be between 1 and {MAX_ACTIVITY_PAGE_SIZE}"
            )
        if self.auto_create_tables is None:
            self.auto_create_tables = not self.is_production
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
