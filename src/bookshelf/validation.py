"""
Input normalization for author and book writes
"""

from .errors import ValidationError

AUTHOR_NAME_MIN_LENGTH = 2
AUTHOR_NAME_MAX_LENGTH = 255
BOOK_TITLE_MAX_LENGTH = 255


def normalize_author_name(name: str | None, *, operation: str) -> str:
    """Trim an author name and check it is usable.

    Raises:
        ValidationError: If the name is missing, blank, too short or too long
    """
    value = (name or "").strip()
    if not value:
        raise ValidationError("Author name is required", field="name", operation=operation)
    if len(value) < AUTHOR_NAME_MIN_LENGTH:
        raise ValidationError(
            f"Author name must be at least {AUTHOR_NAME_MIN_LENGTH} characters long",
            field="name",
            operation=operation,
            target=value,
        )
    if len(value) > AUTHOR_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Author name must be at most {AUTHOR_NAME_MAX_LENGTH} characters long",
            field="name",
            operation=operation,
        )
    return value


def normalize_book_title(title: str | None, *, operation: str) -> str:
    """Trim a book title and check it is usable.

    Raises:
        ValidationError: If the title is missing, blank or too long
    """
    value = (title or "").strip()
    if not value:
        raise ValidationError("Book title is required", field="title", operation=operation)
    if len(value) > BOOK_TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Book title must be at most {BOOK_TITLE_MAX_LENGTH} characters long",
            field="title",
            operation=operation,
        )
    return value
