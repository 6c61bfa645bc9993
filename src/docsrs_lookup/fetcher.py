"""HTTP fetcher for crates.io and docs.rs.

All network I/O goes through a single Fetcher instance per process run. The
Fetcher receives an httpx.AsyncClient via constructor injection; the
``open_state`` context manager owns the client lifecycle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urljoin

import httpx
import structlog

from docsrs_lookup.errors import DocsRsError, ErrorCode

if TYPE_CHECKING:
    from docsrs_lookup.config import FetcherSettings

log = structlog.get_logger()


def build_http_client(settings: FetcherSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=False,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": settings.user_agent},
    )


class Fetcher:
    """HTTP text fetcher with manual redirect handling."""

    def __init__(self, client: httpx.AsyncClient, max_redirects: int = 5) -> None:
        self._client = client
        self._max_redirects = max_redirects

    async def fetch(self, url: str, params: dict[str, str] | None = None) -> str:
        """Fetch a URL and return the response body as text.

        Raises DocsRsError(NETWORK_ERROR) on transport errors, redirect
        loops and non-2xx responses. No retries.
        """
        current_url = url

        try:
            for hop in range(self._max_redirects + 1):
                # Query params belong to the original request only
                response = await self._client.get(current_url, params=params if hop == 0 else None)

                if response.is_redirect and "location" in response.headers:
                    if hop == self._max_redirects:
                        raise DocsRsError(
                            code=ErrorCode.NETWORK_ERROR,
                            message=f"Too many redirects fetching {url}",
                            suggestion="The remote site has an unusually long redirect chain.",
                        )
                    current_url = urljoin(str(response.url), response.headers["location"])
                    log.debug("fetch_redirect", url=url, location=current_url)
                    continue

                if not response.is_success:
                    raise DocsRsError(
                        code=ErrorCode.NETWORK_ERROR,
                        message=f"HTTP {response.status_code} fetching {url}",
                        suggestion=(
                            "Check the crate name and version."
                            if response.status_code == 404
                            else "The remote site may be temporarily unavailable."
                        ),
                    )

                log.info(
                    "fetch_complete",
                    url=str(response.url),
                    status_code=response.status_code,
                    content_length=len(response.text),
                )
                return response.text

        except DocsRsError:
            raise
        except httpx.HTTPError as exc:
            raise DocsRsError(
                code=ErrorCode.NETWORK_ERROR,
                message=f"Network error fetching {url}: {exc}",
                suggestion="Check your internet connection and try again.",
            ) from exc

        # Unreachable but satisfies the type checker
        raise DocsRsError(
            code=ErrorCode.NETWORK_ERROR,
            message="Redirect loop",
        )
