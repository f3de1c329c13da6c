"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.author import Author
from ..types.book import Book


# Input types for mutations
@strawberry.input
class AddAuthorInput:
    """Input for creating a new author."""

    name: str
    bio: str | None = None


@strawberry.input
class UpdateAuthorInput:
    """Input for updating an author. Omitted fields are left untouched."""

    name: str | None = strawberry.UNSET
    bio: str | None = strawberry.UNSET


@strawberry.input
class AddBookInput:
    """Input for creating a new book, linked to its author by name."""

    title: str
    author_name: str
    synopsis: str | None = None


@strawberry.input
class UpdateBookInput:
    """Input for updating a book. Omitted fields are left untouched."""

    title: str | None = strawberry.UNSET
    synopsis: str | None = strawberry.UNSET
    author_name: str | None = strawberry.UNSET


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Author mutations
    @strawberry.mutation(name="addAuthor")
    async def add_author(self, info: strawberry.Info, input: AddAuthorInput) -> Author:
        """Create a new author. Fails if the name is already taken."""
        from ..resolvers.author import add_author

        return await add_author(info, input)

    @strawberry.mutation(name="updateAuthor")
    async def update_author(
        self, info: strawberry.Info, id: strawberry.ID, input: UpdateAuthorInput
    ) -> Author | None:
        """Update an author; null if it does not exist."""
        from ..resolvers.author import update_author

        return await update_author(info, id, input)

    @strawberry.mutation(name="deleteAuthor")
    async def delete_author(self, info: strawberry.Info, id: strawberry.ID) -> bool:
        """Delete an author together with all of their books."""
        from ..resolvers.author import delete_author

        return await delete_author(info, id)

    # Book mutations
    @strawberry.mutation(name="addBook")
    async def add_book(self, info: strawberry.Info, input: AddBookInput) -> Book:
        """Create a new book, creating its author if needed."""
        from ..resolvers.book import add_book

        return await add_book(info, input)

    @strawberry.mutation(name="updateBook")
    async def update_book(
        self, info: strawberry.Info, id: strawberry.ID, input: UpdateBookInput
    ) -> Book | None:
        """Update a book; null if it does not exist."""
        from ..resolvers.book import update_book

        return await update_book(info, id, input)

    @strawberry.mutation(name="deleteBook")
    async def delete_book(self, info: strawberry.Info, id: strawberry.ID) -> bool:
        """Delete a book."""
        from ..resolvers.book import delete_book

        return await delete_book(info, id)
