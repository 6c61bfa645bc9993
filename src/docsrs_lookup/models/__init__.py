from __future__ import annotations

from docsrs_lookup.models.crate import CrateRecord, SearchResponse
from docsrs_lookup.models.docindex import DocIndex, DocItem, ItemType, ParentRef, SymbolEntry
from docsrs_lookup.models.output import ItemList, OutputItem

__all__ = [
    # crate
    "CrateRecord",
    "SearchResponse",
    # docindex
    "DocIndex",
    "DocItem",
    "ItemType",
    "ParentRef",
    "SymbolEntry",
    # output
    "OutputItem",
    "ItemList",
]
