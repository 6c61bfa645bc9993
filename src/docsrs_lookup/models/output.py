from __future__ import annotations

from pydantic import BaseModel


class OutputItem(BaseModel):
    """One row of an Alfred script-filter result."""

    title: str
    subtitle: str = ""
    arg: str
    autocomplete: str | None = None


class ItemList(BaseModel):
    """Top-level Alfred script-filter document: ``{"items": [...]}``."""

    items: list[OutputItem] = []
