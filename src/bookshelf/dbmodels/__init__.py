"""
Database models for Bookshelf (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
constraint names, and the two persisted entities: authors and books.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    DateTime,
    ForeignKey,
    MetaData,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, validates

# Naming convention for deterministic constraint/index names
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


def fold_case(value: str) -> str:
    """Unicode case folding used for case-insensitive name keys."""
    return value.casefold()


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Authors(Base):
    __tablename__ = "authors"
    __table_args__ = (UniqueConstraint("name_key"),)

    # Fields looked up ignoring case, mapped to the column holding their folded key
    case_insensitive_keys = {"name": "name_key"}

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_key: Mapped[str] = mapped_column(Text, nullable=False)
    bio: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    books: Mapped[list["Books"]] = relationship(
        "Books", uselist=True, back_populates="author", passive_deletes=True
    )

    @validates("name")
    def _sync_name_key(self, key: str, value: str) -> str:
        _ = key
        self.name_key = fold_case(value)
        return value


class Books(Base):
    __tablename__ = "books"
    __table_args__ = (UniqueConstraint("title"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    synopsis: Mapped[str | None] = mapped_column(Text)
    author_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("authors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    author: Mapped["Authors"] = relationship("Authors", back_populates="books")


target_metadata = Base.metadata

__all__ = ["Base", "Authors", "Books", "fold_case", "target_metadata"]
