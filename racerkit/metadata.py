"""Data structures for ``cargo metadata`` output."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .interner import intern

_LIB_KINDS = frozenset({"lib", "rlib", "dylib", "proc-macro"})
_DEFAULT_EDITION = "2015"


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object for {what}")
    return data


def _get(data: Mapping[str, Any], key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}` in {what}") from None


def _string(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string for {what}")
    return intern(value)


def _list(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"expected a list for {what}")
    return value


def _path(value: Any, what: str) -> Path:
    if not isinstance(value, str):
        raise ValueError(f"expected a path string for {what}")
    return Path(value)


@dataclass(frozen=True)
class PackageId:
    """Opaque package identifier such as ``"name version (source)"``."""

    value: str

    def name(self) -> str:
        """The package name: everything before the first space."""
        idx = self.value.find(" ")
        if idx < 0:
            raise ValueError("Whitespace not found")
        return self.value[:idx]

    def __str__(self) -> str:
        return self.value


def _package_id(value: Any, what: str) -> PackageId:
    return PackageId(_string(value, what))


@dataclass
class Target:
    """A build target of a package."""

    name: str
    kind: list[str]
    src_path: Path
    edition: str = _DEFAULT_EDITION

    def is_lib(self) -> bool:
        return any(k in _LIB_KINDS for k in self.kind)

    def is_2015(self) -> bool:
        return self.edition == "2015"

    @classmethod
    def from_json(cls, data: Any) -> Target:
        data = _mapping(data, "target")
        kinds = _list(_get(data, "kind", "target"), "target kind")
        return cls(
            name=_string(_get(data, "name", "target"), "target name"),
            kind=[_string(k, "target kind") for k in kinds],
            src_path=_path(_get(data, "src_path", "target"), "target src_path"),
            edition=_string(data.get("edition", _DEFAULT_EDITION), "target edition"),
        )


@dataclass
class Package:
    """A package known to cargo."""

    id: PackageId
    targets: list[Target]
    manifest_path: Path
    edition: str = _DEFAULT_EDITION

    @classmethod
    def from_json(cls, data: Any) -> Package:
        data = _mapping(data, "package")
        targets = _list(_get(data, "targets", "package"), "package targets")
        return cls(
            id=_package_id(_get(data, "id", "package"), "package id"),
            targets=[Target.from_json(t) for t in targets],
            manifest_path=_path(
                _get(data, "manifest_path", "package"), "package manifest_path"
            ),
            edition=_string(data.get("edition", _DEFAULT_EDITION), "package edition"),
        )


@dataclass
class ResolveNode:
    """One node of the resolved dependency graph."""

    id: PackageId
    dependencies: list[PackageId] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> ResolveNode:
        data = _mapping(data, "resolve node")
        deps = _list(_get(data, "dependencies", "resolve node"), "dependencies")
        return cls(
            id=_package_id(_get(data, "id", "resolve node"), "resolve node id"),
            dependencies=[_package_id(d, "dependency id") for d in deps],
        )


@dataclass
class Resolve:
    """The resolved dependency graph."""

    nodes: list[ResolveNode] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> Resolve:
        data = _mapping(data, "resolve")
        nodes = _list(_get(data, "nodes", "resolve"), "resolve nodes")
        return cls(nodes=[ResolveNode.from_json(n) for n in nodes])


@dataclass
class Metadata:
    """The whole ``cargo metadata`` document."""

    packages: list[Package]
    workspace_members: list[PackageId]
    resolve: Resolve | None
    target_directory: Path
    version: int
    workspace_root: Path = field(default_factory=lambda: Path(""))

    @classmethod
    def from_json(cls, data: Any) -> Metadata:
        data = _mapping(data, "metadata")
        packages = _list(_get(data, "packages", "metadata"), "packages")
        members = _list(
            _get(data, "workspace_members", "metadata"), "workspace_members"
        )
        raw_resolve = _get(data, "resolve", "metadata")
        version = _get(data, "version", "metadata")
        if isinstance(version, bool) or not isinstance(version, int) or version < 0:
            raise ValueError("expected a non-negative integer for version")
        root = data.get("workspace_root")
        return cls(
            packages=[Package.from_json(p) for p in packages],
            workspace_members=[_package_id(m, "workspace member") for m in members],
            resolve=None if raw_resolve is None else Resolve.from_json(raw_resolve),
            target_directory=_path(
                _get(data, "target_directory", "metadata"), "target_directory"
            ),
            version=version,
            workspace_root=Path("") if root is None else _path(root, "workspace_root"),
        )


def parse_metadata(text: str | bytes) -> Metadata:
    """Parse the JSON text printed by ``cargo metadata``."""
    return Metadata.from_json(json.loads(text))