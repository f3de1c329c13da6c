"""
Reusable seed data functions for database initialization.

Loads a small sample library so a fresh database has something to query.
Seeding is idempotent: authors are linked by name and titles that already
exist are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..logging import get_logger
from .store import EntityKind, EntityStore

logger = get_logger(__name__)

SAMPLE_LIBRARY: dict[str, list[str]] = {
    "J.K. Rowling": [
        "Harry Potter and the Sorcerer's Stone",
        "Harry Potter and the Chamber of Secrets",
    ],
    "Stephen King": ["It", "The Shining"],
    "Agatha Christie": ["And Then There Were None", "Murder on the Orient Express"],
    "George Orwell": ["1984", "Animal Farm"],
    "Jane Austen": ["Pride and Prejudice"],
}


@dataclass
class SeedResult:
    authors_created: int = 0
    books_created: int = 0
    books_skipped: int = 0


async def seed_library(
    store: EntityStore, library: dict[str, list[str]] | None = None
) -> SeedResult:
    """
    Ensure every author and title of the library exists.

    Args:
        store: Initialized entity store
        library: Mapping of author name to book titles (defaults to SAMPLE_LIBRARY)

    Returns:
        Counts of created and skipped records
    """
    from ..graphql.resolvers.author import find_author_by_name, find_or_create_author

    result = SeedResult()
    library = SAMPLE_LIBRARY if library is None else library

    async with store.begin() as tx:
        for author_name, titles in library.items():
            existed = await find_author_by_name(tx, author_name) is not None
            db_author = await find_or_create_author(tx, author_name)
            if not existed:
                result.authors_created += 1

            for title in titles:
                if await tx.find_many_by_field(EntityKind.BOOK, "title", title):
                    logger.debug("Book already exists", title=title)
                    result.books_skipped += 1
                    continue
                await tx.create(EntityKind.BOOK, {"title": title, "author_id": db_author.id})
                result.books_created += 1

    logger.info(
        "Seed data loaded",
        authors_created=result.authors_created,
        books_created=result.books_created,
        books_skipped=result.books_skipped,
    )
    return result
