"""
Error taxonomy for the bookshelf data layer.

Every error carries the operation that failed and, when there is one, the
identifier or name it targeted, so the transport layer can build a
user-facing message without parsing strings.
"""

from __future__ import annotations

from typing import Any


class BookshelfError(Exception):
    """Base exception for bookshelf operations."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, *, operation: str | None = None, target: Any = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.target = None if target is None else str(target)

    @property
    def extensions(self) -> dict[str, Any]:
        """GraphQL error extensions; graphql-core copies them onto the located error."""
        extensions: dict[str, Any] = {"code": self.code}
        if self.operation:
            extensions["operation"] = self.operation
        if self.target is not None:
            extensions["target"] = self.target
        return extensions


class ConflictError(BookshelfError):
    """An entity with the same unique name or title already exists."""

    code = "CONFLICT"


class NotFoundError(BookshelfError):
    """The targeted entity does not exist."""

    code = "NOT_FOUND"


class ValidationError(BookshelfError):
    """A required field is missing, blank or malformed."""

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        operation: str | None = None,
        target: Any = None,
    ):
        super().__init__(message, operation=operation, target=target)
        self.field = field

    @property
    def extensions(self) -> dict[str, Any]:
        extensions = dict(super().extensions)
        if self.field:
            extensions["field"] = self.field
        return extensions


class StoreError(BookshelfError):
    """The underlying store failed."""

    code = "STORE_ERROR"


class StoreIntegrityError(StoreError):
    """The store rejected a write because it violates a constraint."""
