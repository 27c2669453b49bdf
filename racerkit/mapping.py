"""Package lookup tables built from cargo metadata."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path

from .interner import lookup_interned
from .metadata import Metadata, Package, PackageId, Resolve, ResolveNode, Target


class Edition(IntEnum):
    """Language edition of a package."""

    ED2015 = 2015
    ED2018 = 2018
    ED2021 = 2021

    @classmethod
    def from_str(cls, s: str) -> Edition:
        editions = {"2015": cls.ED2015, "2018": cls.ED2018, "2021": cls.ED2021}
        try:
            return editions[s]
        except KeyError:
            raise ValueError(f"got unexpected edition {s}") from None


@dataclass
class _PackageEntry:
    edition: Edition
    id: PackageId
    lib: Target | None
    deps: list[tuple[str, Path]] = field(default_factory=list)


class PackageMap:
    """Cached dependencies, indexed by position, id and manifest path."""

    def __init__(
        self, packages: Iterable[Package], resolve: Resolve | None = None
    ) -> None:
        self._manifest_to_idx: dict[Path, int] = {}
        self._id_to_idx: dict[PackageId, int] = {}
        self._packages: list[_PackageEntry] = []
        for i, package in enumerate(packages):
            self._id_to_idx[package.id] = i
            self._manifest_to_idx[Path(package.manifest_path)] = i
            lib = next((t for t in package.targets if t.is_lib()), None)
            self._packages.append(
                _PackageEntry(Edition.from_str(package.edition), package.id, lib)
            )
        if resolve is not None:
            self._construct_deps(resolve.nodes)

    def _construct_deps(self, nodes: Iterable[ResolveNode]) -> None:
        for node in nodes:
            idx = self._id_to_idx.get(node.id)
            if idx is None:
                return
            deps = []
            for dep_id in node.dependencies:
                dep_idx = self._id_to_idx.get(dep_id)
                if dep_idx is None:
                    continue
                lib = self._packages[dep_idx].lib
                if lib is not None:
                    deps.append((lib.name, lib.src_path))
            self._packages[idx].deps.extend(deps)

    @classmethod
    def from_metadata(cls, meta: Metadata) -> PackageMap:
        return cls(meta.packages, meta.resolve)

    def ids(self) -> Iterator[PackageId]:
        return (p.id for p in self._packages)

    def id_to_idx(self, package_id: PackageId) -> int | None:
        return self._id_to_idx.get(package_id)

    def get_idx(self, path: str | os.PathLike[str]) -> int | None:
        return self._manifest_to_idx.get(Path(path))

    def get_id(self, idx: int) -> PackageId:
        return self._packages[idx].id

    def get_edition(self, idx: int) -> Edition:
        return self._packages[idx].edition

    def get_lib(self, idx: int) -> Target | None:
        return self._packages[idx].lib

    def get_lib_src_path(self, idx: int) -> Path | None:
        lib = self.get_lib(idx)
        return None if lib is None else lib.src_path

    def get_dependencies(self, idx: int) -> tuple[tuple[str, Path], ...]:
        return tuple(self._packages[idx].deps)

    def get_src_path_from_libname(self, idx: int, name: str) -> Path | None:
        deps = self._packages[idx].deps
        query = lookup_interned(name)
        if query is None:
            return None
        return next((path for lib, path in deps if lib == query), None)