"""docs.rs search-index retrieval.

Stateless: caching of the parsed index is the orchestrator's job.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import urljoin

import structlog

from docsrs_lookup.errors import DocsRsError, ErrorCode
from docsrs_lookup.parser import parse_search_index

if TYPE_CHECKING:
    from docsrs_lookup.models.docindex import DocIndex
    from docsrs_lookup.protocols import AssetLocator, FetcherProtocol

log = structlog.get_logger()


def build_crate_url(docs_host: str, crate_name: str, version: str) -> str:
    """``https://docs.rs/async-std/1.2.0/async-std``: the crate's landing page."""
    return f"{docs_host.rstrip('/')}/{crate_name}/{version}/{crate_name}"


class RegexAssetLocator:
    """Finds ``<script src="...search-index...">`` with a single regex.

    A narrow text search rather than an HTML parse: the landing page is
    generated by rustdoc and the tag shape is stable within a format.
    """

    _SCRIPT_RE = re.compile(
        r"""<script[^</>]*?src=(["'])(?P<src>[^<>"']*?search-index[^</>"']*?)\1[^</>]*?>""",
        re.IGNORECASE,
    )

    def locate(self, html: str) -> str | None:
        match = self._SCRIPT_RE.search(html)
        return match.group("src") if match else None


async def fetch_index(
    fetcher: FetcherProtocol,
    crate_name: str,
    version: str,
    *,
    docs_host: str,
    locator: AssetLocator,
) -> DocIndex:
    """Fetch and parse the search index of one crate version.

    Raises DocsRsError(NETWORK_ERROR) if either request fails and
    DocsRsError(PARSE_ERROR) if the page has no search-index reference or the
    asset cannot be parsed.
    """
    crate_url = build_crate_url(docs_host, crate_name, version)
    log.info("search_index_from_network", crate_name=crate_name, version=version)

    page = await fetcher.fetch(crate_url)

    src = locator.locate(page)
    if src is None:
        raise DocsRsError(
            code=ErrorCode.PARSE_ERROR,
            message=f"No search-index script found on {crate_url}",
            suggestion="docs.rs may not have built documentation for this version.",
        )

    # Relative to the crate page as a directory, same as a browser on ".../<crate>/"
    asset_url = urljoin(f"{crate_url}/", src)
    log.info("search_index_located", crate_name=crate_name, url=asset_url)

    script = await fetcher.fetch(asset_url)
    return parse_search_index(script, crate_name)
