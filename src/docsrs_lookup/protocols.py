"""Protocol interfaces for swappable components.

The orchestrator and AppState reference these protocols, not the concrete
implementations. This allows:
- Tests to use lightweight in-memory implementations
- The HTML scraping strategy to be replaced without touching callers
"""

from __future__ import annotations

from typing import Protocol


class CacheProtocol(Protocol):
    """Interface for the persistent key-value cache."""

    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, value: bytes) -> None: ...

    async def clear(self) -> None: ...


class FetcherProtocol(Protocol):
    """Interface for the HTTP text fetcher."""

    async def fetch(self, url: str, params: dict[str, str] | None = None) -> str: ...


class AssetLocator(Protocol):
    """Finds the search-index script reference in a docs.rs crate page."""

    def locate(self, html: str) -> str | None: ...
