from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CrateRecord(BaseModel):
    """Single crate in a crates.io search response."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    updated_at: str
    created_at: str
    downloads: int
    recent_downloads: int | None = None  # null for crates with no recent activity
    max_version: str
    description: str | None = None
    homepage: str | None = None
    documentation: str | None = None
    repository: str | None = None
    exact_match: bool = False


class SearchResponse(BaseModel):
    """Envelope returned by ``GET /api/v1/crates?q=...``.

    Only ``crates`` is read; ``meta`` and pagination fields are ignored.
    """

    crates: list[CrateRecord]
