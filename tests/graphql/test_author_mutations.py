"""
Tests for author query and mutation resolvers against a SQLite store
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from bookshelf.database.store import EntityKind, StoreSession
from bookshelf.errors import ConflictError, NotFoundError, ValidationError
from bookshelf.graphql.mutations.root import AddAuthorInput, AddBookInput, UpdateAuthorInput
from bookshelf.graphql.relations import Resolved
from bookshelf.graphql.resolvers.author import (
    add_author,
    apply_author_update,
    delete_author,
    resolve_author_by_id,
    resolve_authors,
    update_author,
)
from bookshelf.graphql.resolvers.book import add_book, resolve_books
from bookshelf.graphql.resolvers.relationships import resolve_books_of


class TestAddAuthor:
    """Tests for add_author mutation."""

    @pytest.mark.asyncio
    async def test_add_author_success(self, info):
        author = await add_author(info, AddAuthorInput(name="Jane Austen", bio="Novelist"))

        assert author.name == "Jane Austen"
        assert author.bio == "Novelist"
        assert author.books_relation == Resolved([])
        assert await resolve_books_of(author, info) == []

    @pytest.mark.asyncio
    async def test_add_author_trims_name(self, info):
        author = await add_author(info, AddAuthorInput(name="  Jane Austen  "))

        assert author.name == "Jane Austen"

    @pytest.mark.asyncio
    async def test_duplicate_name_ignoring_case_conflicts(self, info, store):
        await add_author(info, AddAuthorInput(name="Jane"))

        with pytest.raises(ConflictError) as exc_info:
            await add_author(info, AddAuthorInput(name="jane"))

        assert exc_info.value.operation == "add_author"
        assert len(await store.find_all(EntityKind.AUTHOR)) == 1

    @pytest.mark.asyncio
    async def test_duplicate_non_ascii_name_conflicts(self, info, store):
        await add_author(info, AddAuthorInput(name="Émile Zola"))

        with pytest.raises(ConflictError):
            await add_author(info, AddAuthorInput(name="émile zola"))

        assert [a.name for a in await store.find_all(EntityKind.AUTHOR)] == ["Émile Zola"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", "J"])
    async def test_invalid_name_rejected(self, info, store, name):
        with pytest.raises(ValidationError) as exc_info:
            await add_author(info, AddAuthorInput(name=name))

        assert exc_info.value.field == "name"
        assert await store.find_all(EntityKind.AUTHOR) == []


class TestAuthorQueries:
    """Tests for author query resolvers."""

    @pytest.mark.asyncio
    async def test_list_and_get(self, info):
        first = await add_author(info, AddAuthorInput(name="Stephen King"))
        second = await add_author(info, AddAuthorInput(name="Agatha Christie"))

        authors = await resolve_authors(info)
        fetched = await resolve_author_by_id(info, second.id)

        assert [a.id for a in authors] == [first.id, second.id]
        assert fetched is not None
        assert fetched.name == "Agatha Christie"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("author_id", [str(uuid4()), "not-an-id", ""])
    async def test_get_missing_returns_none(self, info, author_id):
        assert await resolve_author_by_id(info, author_id) is None


class TestUpdateAuthor:
    """Tests for update_author mutation."""

    @pytest.mark.asyncio
    async def test_partial_update_keeps_omitted_fields(self, info):
        author = await add_author(info, AddAuthorInput(name="George Orwell", bio="Essayist"))

        updated = await update_author(info, author.id, UpdateAuthorInput(name="Eric Blair"))

        assert updated is not None
        assert updated.id == author.id
        assert updated.name == "Eric Blair"
        assert updated.bio == "Essayist"

    @pytest.mark.asyncio
    async def test_bio_can_be_cleared(self, info):
        author = await add_author(info, AddAuthorInput(name="George Orwell", bio="Essayist"))

        updated = await update_author(info, author.id, UpdateAuthorInput(bio=None))

        assert updated is not None
        assert updated.bio is None
        assert updated.name == "George Orwell"

    @pytest.mark.asyncio
    async def test_missing_author_returns_none(self, info):
        assert await update_author(info, str(uuid4()), UpdateAuthorInput(name="Nobody")) is None
        assert await update_author(info, "garbage", UpdateAuthorInput(name="Nobody")) is None

    @pytest.mark.asyncio
    async def test_rename_to_taken_name_conflicts(self, info):
        await add_author(info, AddAuthorInput(name="Jane Austen"))
        other = await add_author(info, AddAuthorInput(name="Emily Bronte"))

        with pytest.raises(ConflictError):
            await update_author(info, other.id, UpdateAuthorInput(name="JANE AUSTEN"))

    @pytest.mark.asyncio
    async def test_rename_to_taken_non_ascii_name_conflicts(self, info):
        await add_author(info, AddAuthorInput(name="Émile Zola"))
        other = await add_author(info, AddAuthorInput(name="Victor Hugo"))

        with pytest.raises(ConflictError):
            await update_author(info, other.id, UpdateAuthorInput(name="ÉMILE ZOLA"))

    @pytest.mark.asyncio
    async def test_recasing_own_name_is_allowed(self, info):
        author = await add_author(info, AddAuthorInput(name="jane austen"))

        updated = await update_author(info, author.id, UpdateAuthorInput(name="Jane Austen"))

        assert updated is not None
        assert updated.name == "Jane Austen"

    @pytest.mark.asyncio
    async def test_null_name_is_rejected(self, info):
        author = await add_author(info, AddAuthorInput(name="Jane Austen"))

        with pytest.raises(ValidationError):
            await update_author(info, author.id, UpdateAuthorInput(name=None))


class TestDeleteAuthor:
    """Tests for delete_author mutation."""

    @pytest.mark.asyncio
    async def test_delete_cascades_to_books(self, info):
        king = await add_book(info, AddBookInput(title="It", author_name="Stephen King"))
        await add_book(info, AddBookInput(title="The Shining", author_name="Stephen King"))
        await add_book(info, AddBookInput(title="Emma", author_name="Jane Austen"))
        author = await resolve_author_of_book(king, info)

        assert await delete_author(info, author.id) is True

        remaining = [book.title for book in await resolve_books(info)]
        assert remaining == ["Emma"]
        assert await resolve_author_by_id(info, author.id) is None

    @pytest.mark.asyncio
    async def test_delete_missing_returns_false_without_changes(self, info, store):
        await add_book(info, AddBookInput(title="Emma", author_name="Jane Austen"))

        assert await delete_author(info, str(uuid4())) is False
        assert await delete_author(info, "not-an-id") is False

        assert len(await store.find_all(EntityKind.AUTHOR)) == 1
        assert len(await store.find_all(EntityKind.BOOK)) == 1


async def resolve_author_of_book(book, info):
    from bookshelf.graphql.resolvers.relationships import resolve_author_of

    author = await resolve_author_of(book, info)
    assert author is not None
    return author


@pytest.mark.unit
class TestApplyAuthorUpdate:
    """Tests for apply_author_update against a mocked transaction."""

    @pytest.mark.asyncio
    async def test_author_removed_during_update_is_not_found(self, db_author):
        tx = AsyncMock(spec=StoreSession)
        tx.find_by_id.return_value = db_author
        tx.update_by_id.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await apply_author_update(tx, db_author.id, UpdateAuthorInput(bio="Revised"))

        assert exc_info.value.operation == "update_author"
        tx.update_by_id.assert_awaited_once_with(EntityKind.AUTHOR, db_author.id, {"bio": "Revised"})
