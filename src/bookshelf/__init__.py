"""
Bookshelf backend
GraphQL access layer for authors and the books they wrote
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
