from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

import strawberry

from ...database.store import EntityKind, StoreSession
from ...dbmodels import Authors, Books
from ...errors import ConflictError, NotFoundError, StoreIntegrityError
from ...logging import get_logger
from ...validation import normalize_author_name, normalize_book_title
from ..context import get_store_from_info
from ..relations import parse_id
from .author import find_or_create_author

if TYPE_CHECKING:
    from ..mutations.root import AddBookInput, UpdateBookInput
    from ..types.book import Book

logger = get_logger(__name__)


def _to_book_type(db_book: Books, db_author: Authors | None = None) -> Book:
    from ..types.author import Author as AuthorType
    from ..types.book import Book as BookType

    author = AuthorType.from_model(db_author) if db_author is not None else None
    return BookType.from_model(db_book, author=author)


def _title_conflict(title: str, operation: str) -> ConflictError:
    return ConflictError(
        f'Book with title "{title}" already exists.', operation=operation, target=title
    )


async def _ensure_title_available(
    tx: StoreSession, title: str, operation: str, book_id: UUID | None = None
) -> None:
    for existing in await tx.find_many_by_field(EntityKind.BOOK, "title", title):
        if existing.id != book_id:
            raise _title_conflict(title, operation)


# Query resolvers
async def resolve_books(info: strawberry.Info) -> list[Book]:
    """Resolve all books; their authors are resolved lazily."""
    store = get_store_from_info(info)
    db_books = await store.find_all(EntityKind.BOOK)
    return [_to_book_type(db_book) for db_book in db_books]


async def resolve_book_by_id(info: strawberry.Info, id: str) -> Book | None:
    """Resolve a book by ID, or None if there is no such book."""
    book_id = parse_id(id)
    if book_id is None:
        logger.info("Malformed book id", book_id=id)
        return None

    store = get_store_from_info(info)
    db_book = await store.find_by_id(EntityKind.BOOK, book_id)
    if db_book is None:
        logger.info("Book not found", book_id=id)
        return None

    return _to_book_type(db_book)


async def apply_book_update(
    tx: StoreSession, book_id: UUID | None, input: UpdateBookInput
) -> tuple[Books, Authors | None]:
    """
    Apply the provided fields of a book update, re-linking the author by name if given.

    Raises:
        NotFoundError: If the book does not exist
        ConflictError: If the new title belongs to another book
    """
    db_book = await tx.find_by_id(EntityKind.BOOK, book_id) if book_id else None
    if db_book is None:
        raise NotFoundError("Book not found", operation="update_book", target=book_id)

    changes: dict[str, Any] = {}
    if input.title is not strawberry.UNSET:
        title = normalize_book_title(input.title, operation="update_book")
        await _ensure_title_available(tx, title, "update_book", db_book.id)
        changes["title"] = title
    if input.synopsis is not strawberry.UNSET:
        changes["synopsis"] = input.synopsis

    if input.author_name is not strawberry.UNSET:
        author_name = normalize_author_name(input.author_name, operation="update_book")
        db_author = await find_or_create_author(tx, author_name)
        changes["author_id"] = db_author.id
    else:
        db_author = await tx.find_by_id(EntityKind.AUTHOR, db_book.author_id)

    if changes:
        try:
            updated = await tx.update_by_id(EntityKind.BOOK, db_book.id, changes)
        except StoreIntegrityError as e:
            raise _title_conflict(changes.get("title", db_book.title), "update_book") from e
        if updated is None:
            raise NotFoundError("Book not found", operation="update_book", target=book_id)
        db_book = updated

    return db_book, db_author


# Mutation resolvers
async def add_book(info: strawberry.Info, input: AddBookInput) -> Book:
    """
    Create a new book linked to its author by name.

    The author is looked up ignoring case and created when missing; the
    author and the book are written in one transaction.
    """
    title = normalize_book_title(input.title, operation="add_book")
    author_name = normalize_author_name(input.author_name, operation="add_book")
    store = get_store_from_info(info)
    logger.info("Adding new book", title=title, author_name=author_name)

    async with store.begin() as tx:
        await _ensure_title_available(tx, title, "add_book")
        db_author = await find_or_create_author(tx, author_name)
        try:
            db_book = await tx.create(
                EntityKind.BOOK,
                {"title": title, "synopsis": input.synopsis, "author_id": db_author.id},
            )
        except StoreIntegrityError as e:
            raise _title_conflict(title, "add_book") from e

    logger.info("Book created", book_id=str(db_book.id), author_id=str(db_author.id))
    return _to_book_type(db_book, db_author)


async def update_book(info: strawberry.Info, id: str, input: UpdateBookInput) -> Book | None:
    """Update a book's title, synopsis and/or author. Returns None if the book does not exist."""
    store = get_store_from_info(info)
    logger.info("Updating book", book_id=id)

    try:
        async with store.begin() as tx:
            db_book, db_author = await apply_book_update(tx, parse_id(id), input)
    except NotFoundError:
        logger.warning("Book not found for update", book_id=id)
        return None

    logger.info("Book updated", book_id=str(db_book.id), author_id=str(db_book.author_id))
    return _to_book_type(db_book, db_author)


async def delete_book(info: strawberry.Info, id: str) -> bool:
    """Delete a book. Returns False if the book does not exist."""
    book_id = parse_id(id)
    if book_id is None:
        logger.warning("Book not found for deletion", book_id=id)
        return False

    store = get_store_from_info(info)
    logger.info("Deleting book", book_id=id)

    deleted = await store.delete_by_id(EntityKind.BOOK, book_id)
    if not deleted:
        logger.warning("Book not found for deletion", book_id=id)
        return False

    logger.info("Book deleted", book_id=id)
    return True
