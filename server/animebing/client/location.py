"""Browser-history stand-in: the current path plus the entries behind it."""

from typing import Optional
from urllib.parse import urlencode


class Location:
    """A navigable location.

    ``push`` adds a history entry; ``replace`` rewrites the current one, the
    way a silent URL canonicalization must.
    """

    def __init__(self, path: str = "/"):
        self.history: list[str] = [path]

    @property
    def path(self) -> str:
        return self.history[-1]

    def push(self, path: str) -> None:
        self.history.append(path)

    def replace(self, path: str) -> None:
        self.history[-1] = path

    def set_search(self, query: Optional[str]) -> None:
        """Reflect the settled search box value in the URL."""
        query = (query or "").strip()
        self.replace(f"/?{urlencode({'search': query})}" if query else "/")

    def __repr__(self) -> str:
        return f"Location({self.path!r}, depth={len(self.history)})"
