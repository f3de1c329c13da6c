"""
Configuration management for Bookshelf backend
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./bookshelf.db"
    database_pool_size: int = 10
    database_max_overflow: int = 20
    create_tables_on_startup: bool = True

    # Environment
    environment: str = "development"  # 'development', 'staging', 'production'
    debug: bool = True
    sql_echo: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "BOOKSHELF_"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()


def get_async_database_url(database_url: str | None = None) -> str:
    """Return the configured database URL with an async driver selected.

    Plain ``postgresql://`` URLs are upgraded to asyncpg and plain ``sqlite://``
    URLs to aiosqlite. URLs that already name a driver are returned unchanged.
    """
    url = database_url or settings.database_url
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url
