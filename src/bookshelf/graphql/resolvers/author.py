from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

import strawberry

from ...database.store import EntityKind, StoreSession
from ...dbmodels import Authors
from ...errors import ConflictError, NotFoundError, StoreIntegrityError
from ...logging import get_logger
from ...validation import normalize_author_name
from ..context import get_store_from_info
from ..relations import parse_id

if TYPE_CHECKING:
    from ..mutations.root import AddAuthorInput, UpdateAuthorInput
    from ..types.author import Author

logger = get_logger(__name__)


# Query resolvers
async def resolve_authors(info: strawberry.Info) -> list[Author]:
    """Resolve all authors; their books are resolved lazily."""
    store = get_store_from_info(info)
    db_authors = await store.find_all(EntityKind.AUTHOR)

    from ..types.author import Author as AuthorType

    return [AuthorType.from_model(db_author) for db_author in db_authors]


async def resolve_author_by_id(info: strawberry.Info, id: str) -> Author | None:
    """Resolve an author by ID, or None if there is no such author."""
    author_id = parse_id(id)
    if author_id is None:
        logger.info("Malformed author id", author_id=id)
        return None

    store = get_store_from_info(info)
    db_author = await store.find_by_id(EntityKind.AUTHOR, author_id)
    if db_author is None:
        logger.info("Author not found", author_id=id)
        return None

    from ..types.author import Author as AuthorType

    return AuthorType.from_model(db_author)


# Author write primitives shared with book mutations
async def find_author_by_name(tx: StoreSession, name: str) -> Authors | None:
    """Find an author by exact name, ignoring case."""
    return await tx.find_one_by_field_case_insensitive(EntityKind.AUTHOR, "name", name)


async def create_author(
    tx: StoreSession, name: str, bio: str | None = None, *, operation: str = "add_author"
) -> Authors:
    """
    Create an author whose name must not be taken yet.

    Raises:
        ConflictError: If an author with the same name (ignoring case) exists
    """
    if await find_author_by_name(tx, name) is not None:
        raise ConflictError(
            f'Author with name "{name}" already exists.', operation=operation, target=name
        )

    try:
        return await tx.create(EntityKind.AUTHOR, {"name": name, "bio": bio})
    except StoreIntegrityError as e:
        raise ConflictError(
            f'Author with name "{name}" already exists.', operation=operation, target=name
        ) from e


async def find_or_create_author(tx: StoreSession, name: str) -> Authors:
    """
    Return the author with this name (ignoring case), creating it if needed.

    Never raises ConflictError; used wherever a book is linked to an author by name.
    """
    db_author = await find_author_by_name(tx, name)
    if db_author is not None:
        return db_author

    logger.info("Author not found, creating new author", name=name)
    return await tx.create(EntityKind.AUTHOR, {"name": name})


async def apply_author_update(
    tx: StoreSession, author_id: UUID | None, input: UpdateAuthorInput
) -> Authors:
    """
    Apply the provided fields of an author update.

    Raises:
        NotFoundError: If the author does not exist
        ConflictError: If the new name belongs to another author
    """
    db_author = await tx.find_by_id(EntityKind.AUTHOR, author_id) if author_id else None
    if db_author is None:
        raise NotFoundError("Author not found", operation="update_author", target=author_id)

    changes: dict[str, Any] = {}
    if input.name is not strawberry.UNSET:
        name = normalize_author_name(input.name, operation="update_author")
        holder = await find_author_by_name(tx, name)
        if holder is not None and holder.id != db_author.id:
            raise ConflictError(
                f'Author with name "{name}" already exists.',
                operation="update_author",
                target=name,
            )
        changes["name"] = name
    if input.bio is not strawberry.UNSET:
        changes["bio"] = input.bio

    if not changes:
        return db_author

    try:
        updated = await tx.update_by_id(EntityKind.AUTHOR, db_author.id, changes)
    except StoreIntegrityError as e:
        raise ConflictError(
            f'Author with name "{changes.get("name")}" already exists.',
            operation="update_author",
            target=changes.get("name"),
        ) from e
    if updated is None:
        raise NotFoundError("Author not found", operation="update_author", target=author_id)
    return updated


# Mutation resolvers
async def add_author(info: strawberry.Info, input: AddAuthorInput) -> Author:
    """
    Create a new author.

    Unlike the implicit creation done by book mutations, this fails with
    ConflictError when the name is already taken.
    """
    name = normalize_author_name(input.name, operation="add_author")
    store = get_store_from_info(info)
    logger.info("Adding new author", name=name)

    async with store.begin() as tx:
        db_author = await create_author(tx, name, input.bio)

    logger.info("Author created", author_id=str(db_author.id), name=db_author.name)

    from ..types.author import Author as AuthorType

    return AuthorType.from_model(db_author, books=[])


async def update_author(info: strawberry.Info, id: str, input: UpdateAuthorInput) -> Author | None:
    """Update an author's name and/or bio. Returns None if the author does not exist."""
    store = get_store_from_info(info)
    logger.info("Updating author", author_id=id)

    try:
        async with store.begin() as tx:
            db_author = await apply_author_update(tx, parse_id(id), input)
    except NotFoundError:
        logger.warning("Author not found for update", author_id=id)
        return None

    logger.info("Author updated", author_id=str(db_author.id))

    from ..types.author import Author as AuthorType

    return AuthorType.from_model(db_author)


async def delete_author(info: strawberry.Info, id: str) -> bool:
    """
    Delete an author and every book that references it, in one transaction.

    Returns False if the author does not exist.
    """
    author_id = parse_id(id)
    if author_id is None:
        logger.warning("Author not found for deletion", author_id=id)
        return False

    store = get_store_from_info(info)
    logger.info("Deleting author", author_id=id)

    async with store.begin() as tx:
        if await tx.find_by_id(EntityKind.AUTHOR, author_id) is None:
            logger.warning("Author not found for deletion", author_id=id)
            return False

        deleted_books = await tx.delete_many(EntityKind.BOOK, {"author_id": author_id})
        await tx.delete_by_id(EntityKind.AUTHOR, author_id)

    logger.info("Author and associated books deleted", author_id=id, deleted_books=deleted_books)
    return True
