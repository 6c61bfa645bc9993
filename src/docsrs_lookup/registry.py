"""crates.io search client."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from docsrs_lookup.errors import DocsRsError, ErrorCode
from docsrs_lookup.models.crate import SearchResponse

if TYPE_CHECKING:
    from docsrs_lookup.models.crate import CrateRecord
    from docsrs_lookup.protocols import FetcherProtocol

log = structlog.get_logger()


async def search_crates(
    fetcher: FetcherProtocol,
    name: str,
    search_url: str,
) -> list[CrateRecord]:
    """Search crates.io for *name*.

    Crates are returned in the order crates.io ranks them; they are never
    re-sorted locally.
    """
    log.info("crate_search_from_network", crate_name=name)
    body = await fetcher.fetch(search_url, params={"q": name})

    try:
        response = SearchResponse.model_validate_json(body)
    except ValidationError as exc:
        raise DocsRsError(
            code=ErrorCode.DECODE_ERROR,
            message=(
                f"Malformed crates.io search response for {name!r}: "
                f"{exc.error_count()} error(s)"
            ),
            suggestion="crates.io may have changed its API; try again later.",
        ) from exc

    log.info("crate_search_complete", crate_name=name, crate_count=len(response.crates))
    return response.crates
