"""Symbol search over a parsed rustdoc index.

Pure business logic: receives a DocIndex, returns SymbolEntry results. No
knowledge of AppState, the cache or I/O.

Matching is case-sensitive subsequence containment against the item name
(``spawn``); the full path is only for display. Results keep the order in which rustdoc
emitted the items; nothing is sorted or scored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from docsrs_lookup.models.docindex import ItemType, SymbolEntry

if TYPE_CHECKING:
    from docsrs_lookup.models.docindex import DocIndex, DocItem

_PAGE_ITEM_TYPES = frozenset({ItemType.MOD, ItemType.EXTERNCRATE})


def render_path(item: DocItem) -> str:
    """``module::Type::method`` display path of an item."""
    parts = [item.path] if item.path else []
    if item.parent is not None:
        parts.append(item.parent.name)
    parts.append(item.name)
    return "::".join(parts)


def render_url(item: DocItem) -> str:
    """Item page path relative to the docs root, e.g. ``async_std/task/fn.spawn.html``.

    Modules get their own ``index.html``; associated items are anchors on
    their parent's page.
    """
    prefix = item.path.replace("::", "/") + "/" if item.path else ""
    if item.ty in _PAGE_ITEM_TYPES:
        return f"{prefix}{item.name}/index.html"
    if item.parent is not None:
        return f"{prefix}{item.parent.ty}.{item.parent.name}.html#{item.ty}.{item.name}"
    return f"{prefix}{item.ty}.{item.name}.html"


def symbol_url(crate_url: str, fragment: str) -> str:
    # The crate page sits one level below the docs root that fragments are relative to
    return f"{crate_url}/../{fragment}"


def is_subsequence(query: str, text: str) -> bool:
    """True if every character of *query* occurs in *text*, in order."""
    remaining = iter(text)
    return all(char in remaining for char in query)


@dataclass(frozen=True)
class _Candidate:
    key: str
    path: str
    fragment: str
    description: str


@dataclass
class SearchableIndex:
    """Pre-rendered candidates for one crate version, in index order."""

    crate_url: str
    candidates: list[_Candidate] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.candidates)


def build_index(doc_index: DocIndex, crate_url: str) -> SearchableIndex:
    """Render every item's path and URL once so queries only scan strings."""
    candidates = [
        _Candidate(
            key=item.name,
            path=render_path(item),
            fragment=render_url(item),
            description=item.desc,
        )
        for item in doc_index.items
    ]
    return SearchableIndex(crate_url=crate_url, candidates=candidates)


def search(index: SearchableIndex, query: str) -> list[SymbolEntry]:
    """Return every candidate whose name contains *query* as a subsequence.

    An empty query matches everything. Order is the index's natural order.
    """
    return [
        SymbolEntry(
            path=candidate.path,
            description=candidate.description,
            url=symbol_url(index.crate_url, candidate.fragment),
        )
        for candidate in index.candidates
        if is_subsequence(query, candidate.key)
    ]
