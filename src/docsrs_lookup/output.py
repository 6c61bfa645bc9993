"""Record to launcher item mapping.

One pure function per record type, plus the serialiser for the Alfred
script-filter document written to stdout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from docsrs_lookup.docs import build_crate_url
from docsrs_lookup.models.output import ItemList, OutputItem

if TYPE_CHECKING:
    from collections.abc import Iterable

    from docsrs_lookup.models.crate import CrateRecord
    from docsrs_lookup.models.docindex import SymbolEntry


def crate_to_item(crate: CrateRecord, docs_host: str) -> OutputItem:
    """``serde-1.0.0`` / ``[recent/total]description``, opening the crate docs.

    Autocompletes to ``"<name> "`` so the next keystroke starts a symbol query.
    """
    return OutputItem(
        title=f"{crate.name}-{crate.max_version}",
        subtitle=f"[{crate.recent_downloads or 0}/{crate.downloads}]{crate.description or ''}",
        arg=build_crate_url(docs_host, crate.name, crate.max_version),
        autocomplete=f"{crate.name} ",
    )


def symbol_to_item(symbol: SymbolEntry) -> OutputItem:
    return OutputItem(title=symbol.path, subtitle=symbol.description, arg=symbol.url)


def render_items(items: Iterable[OutputItem]) -> str:
    return ItemList(items=list(items)).model_dump_json(exclude_none=True)


def write_items(items: Iterable[OutputItem], stream: TextIO) -> None:
    stream.write(render_items(items))
    stream.write("\n")
    stream.flush()
