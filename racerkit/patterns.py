"""Patterns, name searches inside them, and the leaves of ``use`` trees."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from .codecleaner import ByteRange
from .types import Mutability, Path


class SearchType(Enum):
    """How a searched name is compared with a candidate."""

    EXACT_MATCH = "exact"
    STARTS_WITH = "starts_with"

    def matches(self, searched: str, candidate: str) -> bool:
        if self is SearchType.EXACT_MATCH:
            return candidate == searched
        return candidate.startswith(searched)


@dataclass(frozen=True)
class BindingMode:
    """How an identifier pattern binds: by value or by reference, maybe mutably."""

    by_ref: bool = False
    mutability: Mutability = Mutability.NOT


class Pat:
    """Base of all pattern representations."""

    def search_by_name(self, name: str, search_type: SearchType) -> str | None:
        """Return the first bound identifier matching ``name``, if any."""
        return None


def _first_match(
    pats: Iterable[Pat], name: str, search_type: SearchType
) -> str | None:
    return next(
        (
            found
            for found in (p.search_by_name(name, search_type) for p in pats)
            if found is not None
        ),
        None,
    )


@dataclass
class PatWild(Pat):
    """The ``_`` pattern."""


@dataclass
class PatIdent(Pat):
    """A binding such as ``x`` or ``ref mut x``."""

    binding_mode: BindingMode
    name: str

    def search_by_name(self, name: str, search_type: SearchType) -> str | None:
        return self.name if search_type.matches(name, self.name) else None


@dataclass
class FieldPat:
    """One ``field: pattern`` entry of a struct pattern."""

    field_name: str
    pat: Pat


@dataclass
class PatStruct(Pat):
    """A struct pattern such as ``Foo { a, b: c }``."""

    path: Path
    fields: list[FieldPat] = field(default_factory=list)

    def search_by_name(self, name: str, search_type: SearchType) -> str | None:
        return _first_match((f.pat for f in self.fields), name, search_type)


@dataclass
class PatTupleStruct(Pat):
    """A tuple-struct pattern such as ``Some(x)``."""

    path: Path
    pats: list[Pat] = field(default_factory=list)

    def search_by_name(self, name: str, search_type: SearchType) -> str | None:
        return _first_match(self.pats, name, search_type)


@dataclass
class PatPath(Pat):
    """A path pattern such as ``None`` or ``Foo::Bar``."""

    path: Path


@dataclass
class PatTuple(Pat):
    """A tuple pattern such as ``(a, b)``."""

    pats: list[Pat] = field(default_factory=list)

    def search_by_name(self, name: str, search_type: SearchType) -> str | None:
        return _first_match(self.pats, name, search_type)


@dataclass
class PatRef(Pat):
    """A reference pattern such as ``&x`` or ``&mut x``."""

    pat: Pat
    mutability: Mutability = Mutability.NOT

    def search_by_name(self, name: str, search_type: SearchType) -> str | None:
        return self.pat.search_by_name(name, search_type)


@dataclass
class PatOther(Pat):
    """A pattern that binds nothing searchable: box, literal, range, slice, macro, rest, or."""

    kind: str


@dataclass(frozen=True)
class PathAliasKind:
    """The leaf of a use tree: an identifier, ``self``, or a glob."""

    tag: str
    name: str = ""
    rename_pos: int | None = None

    IDENT = "ident"
    SELF = "self"
    GLOB = "glob"

    @classmethod
    def ident(cls, name: str, rename_pos: int | None = None) -> PathAliasKind:
        return cls(cls.IDENT, name, rename_pos)

    @classmethod
    def self_(cls, name: str, rename_pos: int | None = None) -> PathAliasKind:
        return cls(cls.SELF, name, rename_pos)

    @classmethod
    def glob(cls) -> PathAliasKind:
        return cls(cls.GLOB)

    @property
    def is_glob(self) -> bool:
        return self.tag == self.GLOB

    @property
    def is_self(self) -> bool:
        return self.tag == self.SELF


@dataclass
class PathAlias:
    """One imported item of a ``use`` statement with its path and source range."""

    kind: PathAliasKind
    path: Path
    range: ByteRange