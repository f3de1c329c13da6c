from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...database.store import EntityKind
from ...logging import get_logger
from ..context import get_store_from_info
from ..relations import Reference, Resolved, parse_id

if TYPE_CHECKING:
    from ..types.author import Author
    from ..types.book import Book

logger = get_logger(__name__)


async def resolve_author_of(book: Book, info: strawberry.Info) -> Author | None:
    """
    Resolve the author of a book.

    A resolved author is returned as is. A bare reference is looked up in the
    store; a reference to an author that no longer exists resolves to None.
    """
    relation = book.author_relation
    if isinstance(relation, Resolved):
        return relation.value

    store = get_store_from_info(info)
    logger.debug("Lazily resolving book author", book_id=book.id, author_id=str(relation.id))
    db_author = await store.find_by_id(EntityKind.AUTHOR, relation.id)

    if db_author is None:
        logger.warning(
            "Book references a missing author", book_id=book.id, author_id=str(relation.id)
        )
        return None

    from ..types.author import Author as AuthorType

    return AuthorType.from_model(db_author)


async def resolve_books_of(author: Author, info: strawberry.Info) -> list[Book]:
    """
    Resolve the books written by an author.

    A non-empty resolved list is returned as is. Anything else is looked up
    in the store by author id, so "not loaded" and "no books" both end up as
    an empty list when the author has none.
    """
    relation = author.books_relation
    if isinstance(relation, Resolved) and relation.value:
        return relation.value

    author_id = relation.id if isinstance(relation, Reference) else parse_id(author.id)
    if author_id is None:
        return []

    store = get_store_from_info(info)
    logger.debug("Lazily resolving author books", author_id=str(author_id))
    db_books = await store.find_many_by_field(EntityKind.BOOK, "author_id", author_id)

    from ..types.book import Book as BookType

    return [BookType.from_model(db_book, author=author) for db_book in db_books]
