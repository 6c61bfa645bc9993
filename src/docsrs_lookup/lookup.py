"""Lookup orchestration: cache-first crate search and symbol search.

Receives AppState, consults the cache before every network call, and maps
results to launcher items. stdout and argv belong to cli.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from docsrs_lookup.cache import crate_key, search_index_key
from docsrs_lookup.docs import build_crate_url, fetch_index
from docsrs_lookup.models.crate import CrateRecord
from docsrs_lookup.models.docindex import DocIndex
from docsrs_lookup.output import crate_to_item, symbol_to_item
from docsrs_lookup.registry import search_crates
from docsrs_lookup.seeker import build_index, search

if TYPE_CHECKING:
    from docsrs_lookup.models.docindex import SymbolEntry
    from docsrs_lookup.models.output import OutputItem
    from docsrs_lookup.state import AppState

log = structlog.get_logger()

T = TypeVar("T")

_CRATE_LIST = TypeAdapter(list[CrateRecord])
_DOC_INDEX = TypeAdapter(DocIndex)


async def _get_cached(state: AppState, key: str, adapter: TypeAdapter[T]) -> T | None:
    """Typed cache read. A payload that no longer validates counts as a miss."""
    raw = await state.cache.get(key)
    if raw is None:
        log.info("cache_miss", key=key)
        return None
    try:
        value = adapter.validate_json(raw)
    except ValidationError:
        log.warning("cache_decode_error", key=key, exc_info=True)
        return None
    log.info("cache_hit", key=key)
    return value


async def _set_cached(state: AppState, key: str, adapter: TypeAdapter[T], value: T) -> None:
    await state.cache.set(key, adapter.dump_json(value))


async def search_crates_cached(state: AppState, crate_name: str) -> list[CrateRecord]:
    key = crate_key(crate_name)
    cached = await _get_cached(state, key, _CRATE_LIST)
    if cached is not None:
        return cached

    crates = await search_crates(
        state.fetcher, crate_name, search_url=state.settings.registry.search_url
    )
    await _set_cached(state, key, _CRATE_LIST, crates)
    return crates


async def get_doc_index_cached(state: AppState, crate_name: str, version: str) -> DocIndex:
    key = search_index_key(crate_name, version)
    cached = await _get_cached(state, key, _DOC_INDEX)
    if cached is not None:
        return cached

    doc_index = await fetch_index(
        state.fetcher,
        crate_name,
        version,
        docs_host=state.settings.docs.host,
        locator=state.locator,
    )
    await _set_cached(state, key, _DOC_INDEX, doc_index)
    return doc_index


async def search_symbols(
    state: AppState,
    crate_name: str,
    version: str,
    symbol_name: str,
) -> list[SymbolEntry]:
    doc_index = await get_doc_index_cached(state, crate_name, version)
    crate_url = build_crate_url(state.settings.docs.host, crate_name, version)
    symbols = search(build_index(doc_index, crate_url), symbol_name)
    log.info(
        "symbol_search_complete",
        crate_name=crate_name,
        version=version,
        query=symbol_name,
        match_count=len(symbols),
        index_size=len(doc_index.items),
    )
    return symbols


def find_exact_crate(crates: list[CrateRecord], crate_name: str) -> CrateRecord | None:
    """First crate whose name equals *crate_name*.

    The registry's own ``exact_match`` flag is not consulted.
    """
    return next((crate for crate in crates if crate.name == crate_name), None)


async def suggest(state: AppState, crate_name: str, symbol_name: str) -> list[OutputItem]:
    """Resolve launcher input to output items.

    The crate search always runs first: whether symbol mode applies depends
    on an exact-name crate being in its results.
    """
    crates = await search_crates_cached(state, crate_name)
    found = find_exact_crate(crates, crate_name)

    if symbol_name and found is not None:
        log.info("symbol_mode", crate_name=found.name, version=found.max_version, query=symbol_name)
        symbols = await search_symbols(state, found.name, found.max_version, symbol_name)
        return [symbol_to_item(symbol) for symbol in symbols]

    log.info("crate_list_mode", crate_name=crate_name, crate_count=len(crates))
    return [crate_to_item(crate, state.settings.docs.host) for crate in crates]


async def clear_cache(state: AppState) -> None:
    await state.cache.clear()
