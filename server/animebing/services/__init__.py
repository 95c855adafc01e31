"""Services for AnimeBing."""

from .cache import Cache
from .catalog_store import CatalogStore, get_store

__all__ = ["Cache", "CatalogStore", "get_store"]
