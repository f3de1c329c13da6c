"""
Author GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import strawberry

from ...dbmodels import Authors
from ..relations import Reference, Resolved

if TYPE_CHECKING:
    from .book import Book


@strawberry.type
class Author:
    """Author type for GraphQL API."""

    id: strawberry.ID
    name: str
    bio: str | None
    created_at: datetime
    updated_at: datetime
    books_relation: strawberry.Private[Reference | Resolved]

    @strawberry.field
    async def books(
        self, info: strawberry.Info
    ) -> list[Annotated["Book", strawberry.lazy(".book")]]:
        """Get the books written by this author."""
        from ..resolvers.relationships import resolve_books_of

        return await resolve_books_of(self, info)

    @classmethod
    def from_model(cls, author: Authors, books: "list[Book] | None" = None) -> "Author":
        """Build the GraphQL type; books stay unresolved unless given."""
        return cls(
            id=strawberry.ID(str(author.id)),
            name=author.name,
            bio=author.bio,
            created_at=author.created_at,
            updated_at=author.updated_at,
            books_relation=Reference(author.id) if books is None else Resolved(books),
        )
