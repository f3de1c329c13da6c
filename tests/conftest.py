"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
import strawberry

# Add src directory to path so imports work
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bookshelf.database.store import EntityStore  # noqa: E402
from bookshelf.dbmodels import Authors, Books  # noqa: E402


@pytest.fixture(scope="function")
def database_url(tmp_path: Path) -> str:
    """Return the URL of a fresh SQLite database file for this test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'bookshelf.db'}"


@pytest_asyncio.fixture(scope="function")
async def store(database_url: str) -> AsyncGenerator[EntityStore, None]:
    """Provide an initialized entity store with all tables created."""
    entity_store = EntityStore.from_url(database_url)
    await entity_store.initialize(create_tables=True)
    yield entity_store
    await entity_store.close()


@pytest.fixture
def make_info() -> Callable[[Any], MagicMock]:
    """Build a mock GraphQL info object whose context carries the given store."""

    def factory(store: Any) -> MagicMock:
        info = MagicMock(spec=strawberry.Info)
        info.context = {"store": store}
        return info

    return factory


@pytest.fixture
def info(store: EntityStore, make_info: Callable[[Any], MagicMock]) -> MagicMock:
    """Mock GraphQL info bound to the test store."""
    return make_info(store)


@pytest.fixture
def execute(store: EntityStore) -> Callable[..., Awaitable[Any]]:
    """Execute a GraphQL document against the schema with the test store."""
    from bookshelf.graphql.schema import build_context, schema

    async def run(query: str, variables: dict[str, Any] | None = None) -> Any:
        return await schema.execute(
            query, variable_values=variables, context_value=build_context(store)
        )

    return run


@pytest.fixture
def db_author() -> Authors:
    """A detached author row."""
    now = datetime.now(UTC)
    return Authors(id=uuid4(), name="Ursula K. Le Guin", bio=None, created_at=now, updated_at=now)


@pytest.fixture
def db_book(db_author: Authors) -> Books:
    """A detached book row written by db_author."""
    now = datetime.now(UTC)
    return Books(
        id=uuid4(),
        title="The Dispossessed",
        synopsis=None,
        author_id=db_author.id,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
