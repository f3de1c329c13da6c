"""
Book GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import strawberry

from ...dbmodels import Books
from ..relations import Reference, Resolved

if TYPE_CHECKING:
    from .author import Author


@strawberry.type
class Book:
    """Book type for GraphQL API."""

    id: strawberry.ID
    title: str
    synopsis: str | None
    created_at: datetime
    updated_at: datetime
    author_relation: strawberry.Private[Reference | Resolved]

    @strawberry.field
    async def author(
        self, info: strawberry.Info
    ) -> Annotated["Author", strawberry.lazy(".author")] | None:
        """Get the author of this book; null if the author no longer exists."""
        from ..resolvers.relationships import resolve_author_of

        return await resolve_author_of(self, info)

    @classmethod
    def from_model(cls, book: Books, author: "Author | None" = None) -> "Book":
        """Build the GraphQL type; the author stays a reference unless given."""
        return cls(
            id=strawberry.ID(str(book.id)),
            title=book.title,
            synopsis=book.synopsis,
            created_at=book.created_at,
            updated_at=book.updated_at,
            author_relation=Reference(book.author_id) if author is None else Resolved(author),
        )
