"""Type, path and generics representations used during completion."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path as FilePath
from typing import Any

_CLOSURE_TRAITS = ("Fn", "FnMut", "FnOnce")


class Mutability(Enum):
    """Whether a reference or pointer allows mutation."""

    NOT = "not"
    MUT = "mut"


@dataclass(frozen=True)
class Scope:
    """A position in a file."""

    filepath: FilePath
    point: int


@dataclass
class Match:
    """A named item found in source."""

    matchstr: str
    filepath: FilePath
    point: int
    coords: Any = None
    local: bool = False
    mtype: str = ""
    contextstr: str = ""
    docs: str = ""
    bounds: TraitBounds | None = None


class PathPrefix(Enum):
    """Leading keyword of a path, such as ``crate`` or ``::``."""

    CRATE = "crate"
    SUPER = "super"
    SELF = "self"
    GLOBAL = "{{root}}"

    @classmethod
    def from_str(cls, s: str) -> PathPrefix | None:
        try:
            return cls(s)
        except ValueError:
            return None


@dataclass
class PathSegment:
    """One ``::``-separated part of a path, with its generic arguments."""

    name: str
    generics: list[Ty] = field(default_factory=list)
    # return type when the segment names a closure trait
    output: Ty | None = None


@dataclass
class Path:
    """A path such as ``std::vec::Vec<T>``."""

    prefix: PathPrefix | None = None
    segments: list[PathSegment] = field(default_factory=list)

    @classmethod
    def from_iter(cls, is_global: bool, names: Iterable[str]) -> Path:
        prefix = PathPrefix.GLOBAL if is_global else None
        segments = []
        for i, name in enumerate(names):
            if i == 0 and prefix is None:
                detected = PathPrefix.from_str(name)
                if detected is not None:
                    prefix = detected
                    continue
            segments.append(PathSegment(name))
        return cls(prefix, segments)

    @classmethod
    def from_vec(cls, is_global: bool, names: Sequence[str]) -> Path:
        return cls.from_iter(is_global, names)

    @classmethod
    def single(cls, segment: PathSegment) -> Path:
        return cls(None, [segment])

    def is_single(self) -> bool:
        return len(self.segments) == 1

    def set_prefix(self) -> None:
        """Move a leading prefix keyword out of the segments."""
        if self.prefix is not None or not self.segments:
            return
        self.prefix = PathPrefix.from_str(self.segments[0].name)
        if self.prefix is not None:
            del self.segments[0]

    def extend(self, other: Path) -> Path:
        self.segments.extend(other.segments)
        return self

    def name(self) -> str | None:
        return self.segments[-1].name if self.segments else None

    def generic_types(self) -> Iterator[Ty]:
        """The generic arguments of the last segment."""
        return iter(self.segments[-1].generics)

    def replace_by_bounds(self, generics: GenericsArgs) -> None:
        """Replace generic arguments naming type parameters of ``generics``."""
        for segment in self.segments:
            segment.generics = [_replace_bound(g, generics) for g in segment.generics]

    def debug_repr(self) -> str:
        parts = []
        for segment in self.segments:
            text = segment.name
            has_output = segment.output is not None
            if has_output:
                text += "("
            if segment.generics:
                inner = ",".join(repr(ty) for ty in segment.generics)
                text += inner if has_output else f"<{inner}>"
            if has_output:
                text += f")->{segment.output!r}"
            parts.append(text)
        return "P[" + "::".join(parts) + "]"

    def __str__(self) -> str:
        parts = []
        for segment in self.segments:
            text = segment.name
            if segment.generics:
                text += "<" + ", ".join(str(ty) for ty in segment.generics) + ">"
            parts.append(text)
        return "::".join(parts)


def _replace_bound(ty: Ty, generics: GenericsArgs) -> Ty:
    if not isinstance(ty, TyPathSearch):
        return ty
    found = generics.search_param_by_path(ty.search.path)
    if found is None:
        ty.search.path.replace_by_bounds(generics)
        return ty
    param = found[1]
    if param.resolved is not None:
        return param.resolved
    return TyMatch(param.into_match())


@dataclass
class PathSearch:
    """A path together with the place it has to be resolved from."""

    path: Path
    filepath: FilePath
    point: int

    def __repr__(self) -> str:
        return f'Search [{self.path.debug_repr()}, "{self.filepath}", {self.point}]'


@dataclass
class TraitBounds:
    """A list of trait paths, as in ``T: Debug + Clone``."""

    searches: list[PathSearch] = field(default_factory=list)

    def __iter__(self) -> Iterator[PathSearch]:
        return iter(self.searches)

    def __len__(self) -> int:
        return len(self.searches)

    def find_by_name(self, name: str) -> PathSearch | None:
        return self.find_by_names([name])

    def find_by_names(self, names: Iterable[str]) -> PathSearch | None:
        wanted = set(names)
        return next(
            (
                ps
                for ps in self.searches
                if len(ps.path.segments) == 1 and ps.path.segments[0].name in wanted
            ),
            None,
        )

    def has_closure(self) -> bool:
        return self.get_closure() is not None

    def get_closure(self) -> PathSearch | None:
        return self.find_by_names(_CLOSURE_TRAITS)

    def extend(self, other: TraitBounds) -> None:
        self.searches.extend(other.searches)


@dataclass
class TypeParameter:
    """A declared type parameter such as ``T: From<String>``."""

    name: str
    point: int
    filepath: FilePath
    bounds: TraitBounds = field(default_factory=TraitBounds)
    resolved: Ty | None = None

    def into_match(self) -> Match:
        return Match(
            matchstr=self.name,
            filepath=self.filepath,
            point=self.point,
            mtype="TypeParameter",
            bounds=self.bounds,
        )

    def resolve(self, ty: Ty) -> None:
        self.resolved = ty

    def add_bound(self, bounds: TraitBounds) -> None:
        """Add the bounds whose trait name is not present yet."""
        added = [
            ps
            for ps in bounds
            if (name := ps.path.name()) is None or self.bounds.find_by_name(name) is None
        ]
        self.bounds.searches.extend(added)


@dataclass
class GenericsArgs:
    """The type parameters of an item, as in ``<T: Clone, U>``."""

    params: list[TypeParameter] = field(default_factory=list)

    def __iter__(self) -> Iterator[TypeParameter]:
        return iter(self.params)

    def __len__(self) -> int:
        return len(self.params)

    def extend(self, other: GenericsArgs) -> None:
        self.params.extend(other.params)

    def get_idents(self) -> list[str]:
        return [p.name for p in self.params]

    def search_param_by_path(self, path: Path) -> tuple[int, TypeParameter] | None:
        if not path.is_single():
            return None
        return self.search_param_by_name(path.segments[0].name)

    def search_param_by_name(self, name: str) -> tuple[int, TypeParameter] | None:
        return next(
            ((i, p) for i, p in enumerate(self.params) if p.name == name), None
        )

    def get_tbound_match(self, name: str) -> Match | None:
        found = self.search_param_by_name(name)
        return None if found is None else found[1].into_match()

    def add_bound(self, pos: int, bounds: TraitBounds) -> None:
        if 0 <= pos < len(self.params):
            self.params[pos].add_bound(bounds)

    def apply_types(self, types: Iterable[Ty]) -> None:
        for param, ty in zip(self.params, types):
            param.resolve(ty)


class Ty:
    """Base of all type representations."""

    def dereference(self) -> Ty:
        ty = self
        while isinstance(ty, TyRefPtr):
            ty = ty.ty
        return ty

    def _deref_with_count(self) -> tuple[Ty, int]:
        ty, count = self, 0
        while isinstance(ty, TyRefPtr):
            ty, count = ty.ty, count + 1
        return ty, count

    def _wrap_by_ref(self, count: int) -> Ty:
        ty = self
        for _ in range(count):
            ty = TyRefPtr(ty, Mutability.NOT)
        return ty

    def replace_by_resolved_generics(self, generics: GenericsArgs) -> Ty:
        """Substitute a type parameter that has a resolved type."""
        ty, count = self._deref_with_count()
        if isinstance(ty, TyPathSearch):
            found = generics.search_param_by_path(ty.search.path)
            if found is not None and found[1].resolved is not None:
                return found[1].resolved._wrap_by_ref(count)
        return ty._wrap_by_ref(count)

    def replace_by_generics(self, generics: GenericsArgs) -> Ty:
        """Substitute type parameters, resolved or not, including nested ones."""
        ty, count = self._deref_with_count()
        if isinstance(ty, TyPathSearch):
            found = generics.search_param_by_path(ty.search.path)
            if found is not None:
                param = found[1]
                if param.resolved is not None:
                    return param.resolved._wrap_by_ref(count)
                return TyMatch(param.into_match())
            ty = copy.deepcopy(ty)
            ty.search.path.replace_by_bounds(generics)
        return ty._wrap_by_ref(count)


@dataclass
class TyMatch(Ty):
    match: Match

    def __str__(self) -> str:
        return self.match.matchstr


@dataclass
class TyPathSearch(Ty):
    search: PathSearch

    def __str__(self) -> str:
        return str(self.search.path)


@dataclass
class TyTuple(Ty):
    items: list[Ty | None] = field(default_factory=list)

    def __str__(self) -> str:
        inner = ", ".join("UNKNOWN" if t is None else str(t) for t in self.items)
        return f"({inner})"


@dataclass
class TyArray(Ty):
    ty: Ty
    length: str

    def __str__(self) -> str:
        return f"[{self.ty}; {self.length}]"


@dataclass
class TyRefPtr(Ty):
    ty: Ty
    mutability: Mutability = Mutability.NOT

    def __str__(self) -> str:
        if self.mutability is Mutability.MUT:
            return f"&mut {self.ty}"
        return f"&{self.ty}"


@dataclass
class TySlice(Ty):
    ty: Ty

    def __str__(self) -> str:
        return f"[{self.ty}]"


@dataclass
class TyPtr(Ty):
    ty: Ty
    mutability: Mutability = Mutability.NOT

    def __str__(self) -> str:
        if self.mutability is Mutability.MUT:
            return f"*mut {self.ty}"
        return f"*const {self.ty}"


@dataclass
class TyTraitObject(Ty):
    bounds: TraitBounds

    def __str__(self) -> str:
        return "<" + ",".join(str(ps.path) for ps in self.bounds) + ">"


@dataclass
class TySelf(Ty):
    scope: Scope

    def __str__(self) -> str:
        return "Self"


@dataclass
class TyFuture(Ty):
    ty: Ty
    scope: Scope

    def __str__(self) -> str:
        return f"impl Future<Output={self.ty}>"


@dataclass
class TyNever(Ty):
    def __str__(self) -> str:
        return "!"


@dataclass
class TyDefault(Ty):
    def __str__(self) -> str:
        return "()"


@dataclass
class TyUnsupported(Ty):
    def __str__(self) -> str:
        return "_"