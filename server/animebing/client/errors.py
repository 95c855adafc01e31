"""Errors raised by the browsing client."""

from typing import Any, Optional


class AnimeBingError(Exception):
    """Base class for browsing client errors."""


class MissingIdentifier(AnimeBingError, ValueError):
    """Raised when a lookup is attempted without an identifier.

    This is a caller bug; nothing is fetched.
    """

    def __init__(self, message: str = "An identifier is required to resolve a catalog entry"):
        super().__init__(message)


class NotFound(AnimeBingError):
    """Raised when every resolution strategy came up empty."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"No catalog entry matches {identifier!r}")


class TransportFailure(AnimeBingError):
    """Raised when the network or the backend failed during a read.

    Distinct from ``NotFound``: the entry may well exist. Eligible for a
    user-initiated retry.
    """

    def __init__(self, operation: str, cause: Any):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Request failed in '{operation}': {cause}")


class StaleResolution(AnimeBingError):
    """Raised when a resolution finished after a newer one had started."""

    def __init__(self, identifier: str, generation: int):
        self.identifier = identifier
        self.generation = generation
        super().__init__(f"Resolution of {identifier!r} superseded (generation {generation})")


class RequestRejected(AnimeBingError):
    """Raised when the backend refuses an admin request (4xx)."""

    def __init__(self, operation: str, status_code: int, detail: Optional[str] = None):
        self.operation = operation
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"'{operation}' rejected with HTTP {status_code}: {detail or 'no detail'}")
