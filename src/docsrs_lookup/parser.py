"""rustdoc search-index parser.

docs.rs serves a ``search-index*.js`` script per crate version. Its payload
has gone through several layouts across rustdoc releases; this module reads
the ones that embed plain JSON(-ish) data:

* Legacy assignments: ``searchIndex["async_std"]={"i":[[ty,name,path,desc,parent,..]],"p":[..]};``
  with the ``N``/``E``/``T``/``U`` shorthand variables and ``R[n]`` string
  table references.
* ``var searchIndex = JSON.parse('{"async_std":{..}}');`` holding either the
  legacy row layout or the columnar layout (``t``/``n``/``q``/``d``/``i``/``p``).
* ``new Map(JSON.parse('[["async_std",{..}]]'))``.

The output is a flat ``DocIndex`` in the order rustdoc emitted the items.
"""

from __future__ import annotations

import json
import re
from typing import Any

import structlog

from docsrs_lookup.errors import DocsRsError, ErrorCode
from docsrs_lookup.models.docindex import DocIndex, DocItem, ItemType, ParentRef

log = structlog.get_logger()

_ASSIGN_RE = re.compile(r"""searchIndex\[\s*(["'])(?P<crate>[^"']+)\1\s*\]\s*=\s*""")
_JSON_PARSE_RE = re.compile(r"JSON\.parse\(\s*'(?P<body>(?:[^'\\]|\\.)*)'\s*\)", re.DOTALL)
_STRING_TABLE_RE = re.compile(r"\bvar\s+R\s*=\s*")
_IDENT_RE = re.compile(r"[A-Za-z_$][\w$]*(?:\[(?P<index>\d+)\])?")
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")
_JS_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)

# Shorthand variables declared at the top of legacy search-index.js files
_LEGACY_CONSTANTS: dict[str, Any] = {"N": None, "E": "", "T": "t", "U": "u"}
_JSON_LITERALS = {"true": True, "false": False, "null": None}


def parse_search_index(text: str, crate_name: str) -> DocIndex:
    """Parse a search-index script into the index for *crate_name*.

    A search-index file may list several crates; the one whose name matches
    *crate_name* (``-`` read as ``_``) wins, falling back to the first.
    Raises DocsRsError(PARSE_ERROR) when nothing usable is found.
    """
    try:
        crates = _load_raw_crates(text)
    except (TypeError, ValueError, IndexError) as exc:
        raise _parse_error(crate_name, str(exc)) from exc

    if not crates:
        raise _parse_error(crate_name, "no crate entries found")

    key = _pick_crate(crates, crate_name)
    items = _decode_crate(key, crates[key])
    log.info("search_index_parsed", crate=key, item_count=len(items), crate_count=len(crates))
    return DocIndex(crate=key, items=items)


def _parse_error(crate_name: str, detail: str) -> DocsRsError:
    return DocsRsError(
        code=ErrorCode.PARSE_ERROR,
        message=f"Unreadable search index for {crate_name}: {detail}",
        suggestion="This crate's documentation may use an unsupported rustdoc format.",
    )


def _pick_crate(crates: dict[str, Any], crate_name: str) -> str:
    for candidate in (crate_name.replace("-", "_"), crate_name):
        if candidate in crates:
            return candidate
    return next(iter(crates))


# ---------------------------------------------------------------------------
# Payload extraction
# ---------------------------------------------------------------------------


def _load_raw_crates(text: str) -> dict[str, Any]:
    """Return a ``crate name -> raw crate object`` mapping."""
    match = _JSON_PARSE_RE.search(text)
    if match is not None:
        payload = json.loads(_unescape_js(match.group("body")))
        if isinstance(payload, list):
            # new Map(...) form: [[name, data], ...]
            return {name: data for name, data in payload}
        if isinstance(payload, dict):
            return payload
        raise ValueError(f"unexpected JSON payload type {type(payload).__name__}")

    constants = dict(_LEGACY_CONSTANTS)
    table_match = _STRING_TABLE_RE.search(text)
    string_table: list[Any] = []
    if table_match is not None:
        string_table, _ = json.JSONDecoder().raw_decode(text, table_match.end())

    crates: dict[str, Any] = {}
    for assign in _ASSIGN_RE.finditer(text):
        fragment = _js_value_to_json(text, assign.end(), constants, string_table)
        crates[assign.group("crate")] = json.loads(fragment)
    return crates


def _unescape_js(body: str) -> str:
    """Undo single-quoted JS string escaping (``\\'``, ``\\\\``, line continuations)."""
    return _JS_ESCAPE_RE.sub(lambda m: "" if m.group(1) == "\n" else m.group(1), body)


def _js_value_to_json(
    text: str,
    start: int,
    constants: dict[str, Any],
    string_table: list[Any],
) -> str:
    """Copy one JS object/array literal starting at *start*, resolving identifiers.

    Strings are copied verbatim; bare identifiers are replaced with the JSON
    encoding of the constant (or string table entry) they name.
    """
    if text[start : start + 1] not in ("{", "["):
        raise ValueError(f"expected an object literal at offset {start}")

    out: list[str] = []
    depth = 0
    pos = start
    end = len(text)

    while pos < end:
        char = text[pos]

        if char == '"':
            close = pos + 1
            while text[close] != '"':
                close += 2 if text[close] == "\\" else 1
            out.append(text[pos : close + 1])
            pos = close + 1
        elif char == "-" or char.isdigit():
            number = _NUMBER_RE.match(text, pos)
            if number is None:
                raise ValueError(f"bad number at offset {pos}")
            out.append(number.group(0))
            pos = number.end()
        elif char.isalpha() or char in "_$":
            ident = _IDENT_RE.match(text, pos)
            if ident is None:
                raise ValueError(f"bad token at offset {pos}")
            out.append(json.dumps(_resolve_identifier(ident, constants, string_table)))
            pos = ident.end()
        else:
            if char in "{[":
                depth += 1
            elif char in "}]":
                depth -= 1
            out.append(char)
            pos += 1

        if depth == 0:
            return "".join(out)

    raise ValueError("unterminated object literal")


def _resolve_identifier(
    ident: re.Match[str],
    constants: dict[str, Any],
    string_table: list[Any],
) -> Any:
    name = ident.group(0)
    if ident.group("index") is not None:
        return string_table[int(ident.group("index"))]
    if name in _JSON_LITERALS:
        return _JSON_LITERALS[name]
    if name in constants:
        return constants[name]
    raise ValueError(f"unknown identifier {name!r}")


# ---------------------------------------------------------------------------
# Per-crate layouts
# ---------------------------------------------------------------------------


def _decode_crate(crate: str, data: Any) -> list[DocItem]:
    if not isinstance(data, dict):
        raise _parse_error(crate, "crate entry is not an object")
    try:
        if "n" in data and "t" in data:
            return _decode_columnar(data)
        if "i" in data:
            return _decode_rows(data)
    except (TypeError, ValueError, IndexError, KeyError) as exc:
        raise _parse_error(crate, f"malformed item table ({exc})") from exc
    raise _parse_error(crate, "unrecognised crate layout")


def _decode_parents(raw: list[Any]) -> list[ParentRef]:
    return [ParentRef(ty=_item_type(entry[0]), name=entry[1]) for entry in raw]


def _item_type(code: int | str) -> ItemType:
    if isinstance(code, str):
        return ItemType.from_code(ord(code) - ord("A"))
    return ItemType.from_code(code)


def _decode_rows(data: dict[str, Any]) -> list[DocItem]:
    """Legacy layout: ``[ty, name, path, desc, parent_idx, search_type]`` rows."""
    parents = _decode_parents(data.get("p", []))
    items: list[DocItem] = []
    last_path = ""

    for row in data["i"]:
        ty, name, path, desc = row[0], row[1], row[2] or "", row[3] or ""
        parent_idx = row[4] if len(row) > 4 else None
        # Empty path means "same module as the previous item"
        if path:
            last_path = path
        items.append(
            DocItem(
                ty=_item_type(ty),
                name=name,
                path=last_path,
                desc=desc,
                parent=parents[parent_idx] if parent_idx is not None else None,
            )
        )
    return items


def _decode_columnar(data: dict[str, Any]) -> list[DocItem]:
    """Columnar layout: parallel ``t``/``n``/``q``/``d``/``i`` arrays."""
    types = data["t"]
    names = data["n"]
    count = len(names)
    if len(types) != count:
        raise ValueError(f"{len(types)} types for {count} names")

    paths = _expand_paths(data.get("q", []), count)
    descs = data.get("d") or [""] * count
    parent_indexes = data.get("i") or [0] * count
    parents = _decode_parents(data.get("p", []))

    items: list[DocItem] = []
    for pos in range(count):
        # Parent indexes are 1-based; 0 means no parent
        parent_idx = parent_indexes[pos]
        items.append(
            DocItem(
                ty=_item_type(types[pos]),
                name=names[pos],
                path=paths[pos],
                desc=descs[pos] if pos < len(descs) else "",
                parent=parents[parent_idx - 1] if parent_idx else None,
            )
        )
    return items


def _expand_paths(raw: list[Any], count: int) -> list[str]:
    """Expand ``q`` into one module path per item.

    ``q`` is either a dense list where ``""`` repeats the previous path, or a
    sparse list of ``[index, path]`` pairs marking where the path changes.
    """
    if raw and isinstance(raw[0], list):
        changes = {index: path for index, path in raw}
    else:
        changes = {index: path for index, path in enumerate(raw) if path}

    paths: list[str] = []
    last_path = ""
    for pos in range(count):
        last_path = changes.get(pos, last_path)
        paths.append(last_path)
    return paths
