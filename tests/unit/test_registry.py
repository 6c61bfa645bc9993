"""Unit tests for the crates.io search client."""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from docsrs_lookup.errors import DocsRsError, ErrorCode
from docsrs_lookup.fetcher import Fetcher
from docsrs_lookup.registry import search_crates
from tests.conftest import ASYNC_STD, ASYNC_STREAM, SEARCH_URL, search_response


class TestSearchCrates:
    @respx.mock
    async def test_returns_crates_in_registry_order(self) -> None:
        respx.get(SEARCH_URL, params={"q": "async-"}).mock(
            return_value=httpx.Response(200, text=search_response(ASYNC_STREAM, ASYNC_STD))
        )
        async with httpx.AsyncClient() as client:
            crates = await search_crates(Fetcher(client), "async-", SEARCH_URL)

        # Not re-sorted: async-stream has fewer downloads but comes first
        assert [crate.name for crate in crates] == ["async-stream", "async-std"]

    @respx.mock
    async def test_decodes_all_fields(self) -> None:
        respx.get(SEARCH_URL, params={"q": "async-std"}).mock(
            return_value=httpx.Response(200, text=search_response(ASYNC_STD))
        )
        async with httpx.AsyncClient() as client:
            crates = await search_crates(Fetcher(client), "async-std", SEARCH_URL)

        crate = crates[0]
        assert crate.id == "async-std"
        assert crate.max_version == "1.2.0"
        assert crate.downloads == 1234567
        assert crate.recent_downloads == 89012
        assert crate.homepage == "https://async.rs"
        assert crate.exact_match is True

    @respx.mock
    async def test_empty_result(self) -> None:
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, text=search_response()))
        async with httpx.AsyncClient() as client:
            crates = await search_crates(Fetcher(client), "zzzzzz", SEARCH_URL)
        assert crates == []

    @respx.mock
    async def test_null_optional_fields(self) -> None:
        record = {**ASYNC_STREAM, "recent_downloads": None, "description": None}
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, text=search_response(record)))
        async with httpx.AsyncClient() as client:
            crates = await search_crates(Fetcher(client), "async-stream", SEARCH_URL)
        assert crates[0].recent_downloads is None
        assert crates[0].description is None

    @respx.mock
    async def test_unknown_fields_ignored(self) -> None:
        record = {**ASYNC_STD, "badges": [], "links": {"owners": "/api/v1/crates/async-std/owners"}}
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, text=search_response(record)))
        async with httpx.AsyncClient() as client:
            crates = await search_crates(Fetcher(client), "async-std", SEARCH_URL)
        assert crates[0].name == "async-std"

    @respx.mock
    async def test_malformed_json_raises_decode_error(self) -> None:
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))
        async with httpx.AsyncClient() as client:
            with pytest.raises(DocsRsError) as exc_info:
                await search_crates(Fetcher(client), "serde", SEARCH_URL)
        assert exc_info.value.code == ErrorCode.DECODE_ERROR

    @respx.mock
    async def test_missing_required_field_raises_decode_error(self) -> None:
        record = {key: value for key, value in ASYNC_STD.items() if key != "max_version"}
        respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(200, text=json.dumps({"crates": [record]}))
        )
        async with httpx.AsyncClient() as client:
            with pytest.raises(DocsRsError) as exc_info:
                await search_crates(Fetcher(client), "async-std", SEARCH_URL)
        assert exc_info.value.code == ErrorCode.DECODE_ERROR

    @respx.mock
    async def test_http_error_raises_network_error(self) -> None:
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(503))
        async with httpx.AsyncClient() as client:
            with pytest.raises(DocsRsError) as exc_info:
                await search_crates(Fetcher(client), "serde", SEARCH_URL)
        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
