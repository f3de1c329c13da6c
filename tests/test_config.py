"""Tests for settings and database URL handling."""

from bookshelf.config import Settings, get_async_database_url


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("BOOKSHELF_DATABASE_URL", "postgresql://u:p@db/books")
    monkeypatch.setenv("BOOKSHELF_DEBUG", "false")

    settings = Settings()

    assert settings.database_url == "postgresql://u:p@db/books"
    assert settings.debug is False


def test_async_driver_selection():
    assert get_async_database_url("postgresql://u@h/db") == "postgresql+asyncpg://u@h/db"
    assert get_async_database_url("sqlite:///x.db") == "sqlite+aiosqlite:///x.db"
    assert get_async_database_url("sqlite+aiosqlite:///x.db") == "sqlite+aiosqlite:///x.db"
