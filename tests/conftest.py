"""Shared test fixtures for the docsrs_lookup test suite."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from docsrs_lookup.cache import open_cache
from docsrs_lookup.models.crate import CrateRecord
from docsrs_lookup.parser import parse_search_index

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from docsrs_lookup.cache import Cache
    from docsrs_lookup.models.docindex import DocIndex

SEARCH_URL = "https://crates.io/api/v1/crates"
DOCS_HOST = "https://docs.rs"

ASYNC_STD = {
    "id": "async-std",
    "name": "async-std",
    "updated_at": "2019-11-20T10:15:02.461373+00:00",
    "created_at": "2019-08-16T18:23:48.221519+00:00",
    "downloads": 1234567,
    "recent_downloads": 89012,
    "max_version": "1.2.0",
    "description": "Async version of the Rust standard library",
    "homepage": "https://async.rs",
    "documentation": "https://docs.rs/async-std",
    "repository": "https://github.com/async-rs/async-std",
    "exact_match": True,
}

ASYNC_STREAM = {
    "id": "async-stream",
    "name": "async-stream",
    "updated_at": "2019-10-02T08:00:00.000000+00:00",
    "created_at": "2019-06-11T08:00:00.000000+00:00",
    "downloads": 54321,
    "recent_downloads": 4321,
    "max_version": "0.2.0",
    "description": "Asynchronous streams using async & await notation",
    "homepage": None,
    "documentation": None,
    "repository": "https://github.com/tokio-rs/async-stream",
    "exact_match": False,
}

# Legacy rustdoc layout: shorthand constants, R[n] string table, "" = previous path
LEGACY_SEARCH_INDEX = """\
var N=null,E="",T="t",U="u",searchIndex={};
var R=["joinhandle","result","option"];
searchIndex["async_std"]={"doc":"Async version of the Rust standard library","i":[\
[0,"task","async_std","Types and traits for working with asynchronous tasks.",N,N],\
[5,"spawn","async_std::task","Spawns a task.",N,[[["f"]],R[0]]],\
[5,"block_on",E,"Spawns a task and blocks the current thread on its result.",N,N],\
[3,"JoinHandle",E,"A handle that awaits the result of a task.",N,N],\
[11,"task",E,"Returns a handle to the task.",0,N],\
[8,"Read","async_std::io","Read bytes asynchronously.",N,N],\
[10,"poll_read",E,"Attempt to read from the `AsyncRead` into `buf`.",1,N]],\
"p":[[3,"JoinHandle"],[8,"Read"]]};
initSearch(searchIndex);addSearchOptions(searchIndex);
"""

# Columnar layout wrapped in JSON.parse with line continuations and an escaped quote
COLUMNAR_SEARCH_INDEX = r"""var searchIndex = JSON.parse('{\
"tiny":{"doc":"Tiny crate","t":[3,11,5,0],"n":["Point","norm","distance","geo"],\
"q":["tiny","","","tiny"],"d":["It\'s a point.","Euclidean norm.","Distance between two points.","Geometry helpers."],\
"i":[0,1,0,0],"f":[],"p":[[3,"Point"]]}\
}');
if (window.initSearch) {window.initSearch(searchIndex)};
"""

# Map form, letter-coded types, sparse [index, path] module paths
MAP_SEARCH_INDEX = """var searchIndex = new Map(JSON.parse('[["tiny",{"t":"DLFA",\
"n":["Point","norm","distance","geo"],"q":[[0,"tiny"]],\
"d":["A point.","Euclidean norm.","Distance.","Geometry."],"i":[0,1,0,0],"p":[[3,"Point"]]}]]'));
if (typeof exports !== 'undefined') exports.searchIndex = searchIndex;
"""

CRATE_PAGE_HTML = """<!DOCTYPE html><html lang="en"><head>
<meta charset="utf-8"><title>async_std - Rust</title>
<link rel="stylesheet" type="text/css" href="../normalize-20191120.css">
<script src="../storage-20191120.js"></script>
</head><body class="rustdoc mod">
<section id="main" class="content"><h1 class="fqn">Crate async_std</h1></section>
<script>window.rootPath = "../";window.currentCrate = "async_std";</script>
<script src="../aliases.js"></script>
<script src="../main-20191120.js"></script>
<script defer src="../search-index-20191120.js"></script>
</body></html>
"""


def search_response(*crates: dict) -> str:
    return json.dumps({"crates": list(crates), "meta": {"total": len(crates)}})


@pytest.fixture()
def async_std() -> CrateRecord:
    return CrateRecord(**ASYNC_STD)


@pytest.fixture()
def async_stream() -> CrateRecord:
    return CrateRecord(**ASYNC_STREAM)


@pytest.fixture()
def legacy_index() -> DocIndex:
    return parse_search_index(LEGACY_SEARCH_INDEX, "async-std")


@pytest.fixture()
async def cache() -> AsyncIterator[Cache]:
    """In-memory cache, initialised and closed per test."""
    async with open_cache(":memory:") as store:
        yield store
