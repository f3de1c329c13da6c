#!/usr/bin/env python3
"""
CLI entry point for Bookshelf database management.
"""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from bookshelf import __version__
from bookshelf.config import settings
from bookshelf.errors import StoreError
from bookshelf.logging import configure_logging, get_logger

from .seed_data import seed_library
from .store import EntityStore

logger = get_logger(__name__)

T = TypeVar("T")


def _run(database_url: str | None, action: Callable[[EntityStore], Awaitable[T]]) -> T:
    async def runner() -> T:
        store = EntityStore.from_url(database_url)
        try:
            await store.initialize(create_tables=False)
            return await action(store)
        finally:
            await store.close()

    return asyncio.run(runner())


@click.group()
@click.option(
    "--database-url",
    default=None,
    help="Database URL (default: BOOKSHELF_DATABASE_URL or settings)",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: BOOKSHELF_LOG_LEVEL or settings)",
)
@click.version_option(version=__version__, prog_name="bookshelf-db")
@click.pass_context
def main(ctx: click.Context, database_url: str | None, log_level: str | None) -> None:
    """Bookshelf database management."""
    configure_logging(log_level=log_level)
    ctx.obj = {"database_url": database_url or settings.database_url}


@main.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create all tables that do not exist yet."""

    async def action(store: EntityStore) -> None:
        await store.database.create_all()

    try:
        _run(ctx.obj["database_url"], action)
        click.echo("Database tables created")
    except Exception as e:
        logger.error("Database initialization failed", error=str(e))
        sys.exit(1)


@main.command()
@click.pass_context
def seed(ctx: click.Context) -> None:
    """Load the sample library (safe to run repeatedly)."""

    async def action(store: EntityStore):
        await store.database.create_all()
        return await seed_library(store)

    try:
        result = _run(ctx.obj["database_url"], action)
    except StoreError as e:
        logger.error("Seeding failed", error=str(e), operation=e.operation)
        sys.exit(1)

    click.echo(
        f"Seeded {result.authors_created} authors and {result.books_created} books "
        f"({result.books_skipped} books already present)"
    )


@main.command()
@click.confirmation_option(prompt="Drop all bookshelf tables?")
@click.pass_context
def drop(ctx: click.Context) -> None:
    """Drop all bookshelf tables."""

    async def action(store: EntityStore) -> None:
        await store.database.drop_all()

    try:
        _run(ctx.obj["database_url"], action)
        click.echo("Database tables dropped")
    except Exception as e:
        logger.error("Dropping tables failed", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
