"""Browsing client: cached catalog reads, identifier resolution and search."""

from .browser import CatalogBrowser, DetailView
from .catalog_client import AdminClient, CatalogClient, CatalogPage, LookupResult, LookupStatus
from .debounce import SearchDebouncer
from .errors import (
    AnimeBingError,
    MissingIdentifier,
    NotFound,
    RequestRejected,
    StaleResolution,
    TransportFailure,
)
from .location import Location
from .resolver import Resolver

__all__ = [
    "AdminClient",
    "AnimeBingError",
    "CatalogBrowser",
    "CatalogClient",
    "CatalogPage",
    "DetailView",
    "Location",
    "LookupResult",
    "LookupStatus",
    "MissingIdentifier",
    "NotFound",
    "RequestRejected",
    "Resolver",
    "SearchDebouncer",
    "StaleResolution",
    "TransportFailure",
]
