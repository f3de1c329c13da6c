"""
Helpers for reading request-scoped dependencies from the GraphQL context
"""

from typing import TYPE_CHECKING

import strawberry

from ..logging import get_logger

if TYPE_CHECKING:
    from ..database.store import EntityStore

logger = get_logger(__name__)


def get_store_from_info(info: strawberry.Info) -> "EntityStore":
    """
    Extract the entity store from the GraphQL info object.

    Raises:
        RuntimeError: If the executing schema was not given a store
    """
    store = info.context.get("store") if info.context else None
    if store is None:
        logger.error("Entity store not found in GraphQL context")
        raise RuntimeError("Entity store is not configured for this request")
    return store
