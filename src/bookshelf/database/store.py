"""
Entity store adapter over the async SQLAlchemy session.

The store offers the same small set of operations for both collections
(authors and books). ``EntityStore`` runs each call in its own transaction;
``EntityStore.begin()`` hands out a ``StoreSession`` so several calls can
share one transaction.
"""

from __future__ import annotations

import functools
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from ..dbmodels import Authors, Base, Books, fold_case
from ..config import settings
from ..errors import StoreError, StoreIntegrityError
from ..logging import get_logger
from .connection import Database

logger = get_logger(__name__)

T = TypeVar("T")


class EntityKind(Enum):
    """The collections held by the store."""

    AUTHOR = "author"
    BOOK = "book"

    @property
    def model(self) -> type[Base]:
        return _MODELS[self]


_MODELS: dict[EntityKind, type[Base]] = {
    EntityKind.AUTHOR: Authors,
    EntityKind.BOOK: Books,
}


def _wrap_sqlalchemy_error(operation: str, kind: EntityKind | None, error: SQLAlchemyError) -> StoreError:
    target = kind.value if kind else None
    if isinstance(error, IntegrityError):
        return StoreIntegrityError(
            f"{operation} violated a store constraint: {error.orig}",
            operation=operation,
            target=target,
        )
    return StoreError(f"{operation} failed: {error}", operation=operation, target=target)


def store_operation(
    name: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Wrap SQLAlchemy failures of a store method in StoreError with context."""

    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(fn)
        async def wrapper(self: StoreSession, kind: EntityKind, *args: Any, **kwargs: Any) -> T:
            try:
                return await fn(self, kind, *args, **kwargs)
            except SQLAlchemyError as e:
                raise _wrap_sqlalchemy_error(name, kind, e) from e

        return wrapper

    return decorator


def _field(kind: EntityKind, field: str, operation: str) -> InstrumentedAttribute[Any]:
    model = kind.model
    if field not in model.__mapper__.columns:
        raise StoreError(
            f"Unknown field '{field}' for {kind.value}", operation=operation, target=kind.value
        )
    return getattr(model, field)


class StoreSession:
    """Store operations bound to a single session and transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @store_operation("find_all")
    async def find_all(self, kind: EntityKind) -> list[Any]:
        model = kind.model
        stmt = select(model).order_by(model.created_at.asc(), model.id.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @store_operation("find_by_id")
    async def find_by_id(self, kind: EntityKind, id: UUID) -> Any | None:
        return await self.session.get(kind.model, id)

    @store_operation("find_one_by_field_case_insensitive")
    async def find_one_by_field_case_insensitive(
        self, kind: EntityKind, field: str, value: str
    ) -> Any | None:
        model = kind.model
        column = _field(kind, field, "find_one_by_field_case_insensitive")
        key = getattr(model, "case_insensitive_keys", {}).get(field)
        if key is not None:
            condition = getattr(model, key) == fold_case(value)
        else:
            # SQL lower() only folds ASCII on SQLite
            condition = func.lower(column) == value.lower()
        stmt = select(model).where(condition).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    @store_operation("find_many_by_field")
    async def find_many_by_field(self, kind: EntityKind, field: str, value: Any) -> list[Any]:
        model = kind.model
        column = _field(kind, field, "find_many_by_field")
        stmt = select(model).where(column == value).order_by(model.created_at.asc(), model.id.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @store_operation("create")
    async def create(self, kind: EntityKind, data: dict[str, Any]) -> Any:
        for key in data:
            _field(kind, key, "create")
        record = kind.model(**data)
        self.session.add(record)
        await self.session.flush()
        logger.debug("Record created", kind=kind.value, id=str(record.id))
        return record

    @store_operation("update_by_id")
    async def update_by_id(self, kind: EntityKind, id: UUID, data: dict[str, Any]) -> Any | None:
        for key in data:
            _field(kind, key, "update_by_id")
        record = await self.session.get(kind.model, id)
        if record is None:
            return None
        for key, value in data.items():
            setattr(record, key, value)
        await self.session.flush()
        await self.session.refresh(record)
        logger.debug("Record updated", kind=kind.value, id=str(id), fields=sorted(data))
        return record

    @store_operation("delete_by_id")
    async def delete_by_id(self, kind: EntityKind, id: UUID) -> bool:
        record = await self.session.get(kind.model, id)
        if record is None:
            return False
        await self.session.delete(record)
        await self.session.flush()
        logger.debug("Record deleted", kind=kind.value, id=str(id))
        return True

    @store_operation("delete_many")
    async def delete_many(self, kind: EntityKind, filter: dict[str, Any]) -> int:
        if not filter:
            raise StoreError(
                "delete_many requires at least one filter field",
                operation="delete_many",
                target=kind.value,
            )
        conditions = [_field(kind, key, "delete_many") == value for key, value in filter.items()]
        result = await self.session.execute(delete(kind.model).where(*conditions))
        deleted = result.rowcount or 0
        logger.debug("Records deleted", kind=kind.value, count=deleted)
        return deleted


class EntityStore:
    """Entity store with an explicit lifecycle.

    Build one per process, call ``initialize()`` before serving, pass it to
    the GraphQL context, and call ``close()`` on shutdown.
    """

    def __init__(self, database: Database):
        self.database = database

    @classmethod
    def from_url(cls, database_url: str | None = None, **kwargs: Any) -> EntityStore:
        return cls(Database(database_url, **kwargs))

    async def initialize(self, create_tables: bool | None = None) -> None:
        """Open the engine and optionally create missing tables.

        Tables are created when ``create_tables`` is true, or when it is left
        unset and ``settings.create_tables_on_startup`` is enabled.
        """
        self.database.initialize()
        if create_tables is None:
            create_tables = settings.create_tables_on_startup
        if create_tables:
            try:
                await self.database.create_all()
            except SQLAlchemyError as e:
                raise _wrap_sqlalchemy_error("initialize", None, e) from e

    async def close(self) -> None:
        await self.database.dispose()

    @asynccontextmanager
    async def begin(self) -> AsyncGenerator[StoreSession, None]:
        """Run several store operations in one transaction."""
        try:
            async with self.database.session() as session:
                yield StoreSession(session)
        except SQLAlchemyError as e:
            raise _wrap_sqlalchemy_error("commit", None, e) from e

    async def find_all(self, kind: EntityKind) -> list[Any]:
        async with self.begin() as tx:
            return await tx.find_all(kind)

    async def find_by_id(self, kind: EntityKind, id: UUID) -> Any | None:
        async with self.begin() as tx:
            return await tx.find_by_id(kind, id)

    async def find_one_by_field_case_insensitive(
        self, kind: EntityKind, field: str, value: str
    ) -> Any | None:
        async with self.begin() as tx:
            return await tx.find_one_by_field_case_insensitive(kind, field, value)

    async def find_many_by_field(self, kind: EntityKind, field: str, value: Any) -> list[Any]:
        async with self.begin() as tx:
            return await tx.find_many_by_field(kind, field, value)

    async def create(self, kind: EntityKind, data: dict[str, Any]) -> Any:
        async with self.begin() as tx:
            return await tx.create(kind, data)

    async def update_by_id(self, kind: EntityKind, id: UUID, data: dict[str, Any]) -> Any | None:
        async with self.begin() as tx:
            return await tx.update_by_id(kind, id, data)

    async def delete_by_id(self, kind: EntityKind, id: UUID) -> bool:
        async with self.begin() as tx:
            return await tx.delete_by_id(kind, id)

    async def delete_many(self, kind: EntityKind, filter: dict[str, Any]) -> int:
        async with self.begin() as tx:
            return await tx.delete_many(kind, filter)
