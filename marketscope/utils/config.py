"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Claude API (required for any AI generation)
    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-sonnet-4-20250514"

    # Moz Links API (optional - metrics degrade to "Unknown" without it)
    MOZ_ACCESS_ID: Optional[str] = None
    MOZ_SECRET_KEY: Optional[str] = None

    # Database
    DATABASE_URL: Optional[str] = None
    SQLITE_PATH: str = "marketscope_dev.db"
    SQL_DEBUG: bool = False

    # Auth
    AUTH_ENABLED: bool = True
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    # Timeouts (seconds) and retries
    METRICS_TIMEOUT: float = 15.0
    METRICS_MAX_RETRIES: int = 2
    GENERATION_TIMEOUT: float = 120.0

    # Generation limits
    BLOG_IDEA_COUNT: int = 6

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase

    @property
    def has_moz(self) -> bool:
        """Check if Moz credentials are configured."""
        return bool(self.MOZ_ACCESS_ID and self.MOZ_SECRET_KEY)

    @property
    def cors_origin_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
