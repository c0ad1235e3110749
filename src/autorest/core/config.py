"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: AUTOREST_
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTOREST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Database (SQLAlchemy)
    database_url: str = Field(
        default="postgresql+psycopg://localhost:5432/addressbook",
        description="SQLAlchemy URL of the database to expose",
    )
    db_schema: str | None = Field(
        default=None,
        description="Schema whose tables are exposed (default: connection default schema)",
    )

    # SQLAlchemy pool settings
    pool_size: int = Field(default=5)
    max_overflow: int = Field(default=10)
    pool_timeout: float = Field(default=30.0)
    echo_sql: bool = Field(default=False)

    # API
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000)
    base_url: str | None = Field(
        default=None,
        description="Public base address used for resource locations (default: from request)",
    )
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")  # 'json' or 'console'


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
