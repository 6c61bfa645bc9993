from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ItemType(StrEnum):
    """rustdoc item kinds. Member order matches rustdoc's integer type codes."""

    MOD = "mod"
    EXTERNCRATE = "externcrate"
    IMPORT = "import"
    STRUCT = "struct"
    ENUM = "enum"
    FN = "fn"
    TYPE = "type"
    STATIC = "static"
    TRAIT = "trait"
    IMPL = "impl"
    TYMETHOD = "tymethod"
    METHOD = "method"
    STRUCTFIELD = "structfield"
    VARIANT = "variant"
    MACRO = "macro"
    PRIMITIVE = "primitive"
    ASSOCIATEDTYPE = "associatedtype"
    CONSTANT = "constant"
    ASSOCIATEDCONSTANT = "associatedconstant"
    UNION = "union"
    FOREIGNTYPE = "foreigntype"
    KEYWORD = "keyword"
    EXISTENTIAL = "existential"
    ATTR = "attr"
    DERIVE = "derive"
    TRAITALIAS = "traitalias"

    @classmethod
    def from_code(cls, code: int) -> ItemType:
        members = list(cls)
        if not 0 <= code < len(members):
            raise ValueError(f"Unknown rustdoc item type code: {code}")
        return members[code]


class ParentRef(BaseModel):
    """The type an associated item (method, field, variant) belongs to."""

    model_config = ConfigDict(frozen=True)

    ty: ItemType
    name: str


class DocItem(BaseModel):
    """One documentable item from a rustdoc search index."""

    model_config = ConfigDict(frozen=True)

    ty: ItemType
    name: str
    path: str = ""  # "::"-separated module path, e.g. "async_std::task"
    desc: str = ""
    parent: ParentRef | None = None


class DocIndex(BaseModel):
    """Parsed search index for one crate version, in rustdoc's emission order."""

    crate: str
    items: list[DocItem] = []


class SymbolEntry(BaseModel):
    """A search hit, rendered for display. Derived per query, never cached."""

    path: str
    description: str
    url: str
