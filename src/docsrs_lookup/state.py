"""Application state container.

AppState is created once per process run by ``cli.open_state`` and passed to
every orchestrator function. It owns no resources itself: the HTTP client and
the cache connection are closed by the context manager that built it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from docsrs_lookup.docs import RegexAssetLocator

if TYPE_CHECKING:
    from docsrs_lookup.config import Settings
    from docsrs_lookup.protocols import AssetLocator, CacheProtocol, FetcherProtocol


@dataclass
class AppState:
    """Holds all shared runtime state for one lookup."""

    settings: Settings
    cache: CacheProtocol
    fetcher: FetcherProtocol
    locator: AssetLocator = field(default_factory=RegexAssetLocator)
