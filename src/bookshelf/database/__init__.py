"""
Database module for Bookshelf backend
"""

from .connection import Database
from .store import EntityKind, EntityStore, StoreSession

__all__ = ["Database", "EntityKind", "EntityStore", "StoreSession"]
