"""Integration test fixtures.

Provides a fully wired AppState: in-memory SQLite cache, a real httpx
client (mocked per test with respx) and default settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from docsrs_lookup.cache import open_cache
from docsrs_lookup.config import Settings
from docsrs_lookup.fetcher import Fetcher
from docsrs_lookup.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@pytest.fixture()
async def app_state() -> AsyncIterator[AppState]:
    async with open_cache(":memory:") as cache:
        async with httpx.AsyncClient() as client:
            yield AppState(settings=Settings(), cache=cache, fetcher=Fetcher(client))
