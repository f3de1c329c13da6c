"""
Relationship field variants and identifier parsing.

A relationship field on a GraphQL type holds either a ``Reference`` (only the
identifier is known, the related data still has to be fetched) or a
``Resolved`` value (the related data was loaded together with the parent).
Field resolvers dispatch on the variant instead of inspecting the shape of
the value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar
from uuid import UUID

T = TypeVar("T")


@dataclass(frozen=True)
class Reference:
    """Bare identifier of the related entity."""

    id: UUID


@dataclass(frozen=True)
class Resolved(Generic[T]):
    """Related data that is already materialized."""

    value: T


Relation = Reference | Resolved[T]


def parse_id(value: str | UUID | None) -> UUID | None:
    """Parse an incoming identifier.

    Returns None for a missing or malformed identifier, which can never
    match a stored record.
    """
    if value is None:
        return None
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError:
        return None
