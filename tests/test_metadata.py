import json
from pathlib import Path

import pytest

from racerkit.interner import intern
from racerkit.metadata import (
    Metadata,
    Package,
    PackageId,
    Resolve,
    ResolveNode,
    Target,
    parse_metadata,
)


def _target(name, kind=("lib",), edition=None):
    data = {"name": name, "kind": list(kind), "src_path": f"/work/{name}/src/lib.rs"}
    if edition is not None:
        data["edition"] = edition
    return data


def _package(name, edition="2018"):
    return {
        "id": f"{name} 0.1.0 (path+file:///work/{name})",
        "targets": [_target(name)],
        "manifest_path": f"/work/{name}/Cargo.toml",
        "edition": edition,
    }


def _no_deps_doc():
    packages = [_package("alpha"), _package("beta")]
    return {
        "packages": packages,
        "workspace_members": [p["id"] for p in packages],
        "resolve": None,
        "target_directory": "/work/target",
        "version": 1,
        "workspace_root": "/work",
    }


def test_no_deps():
    meta = parse_metadata(json.dumps(_no_deps_doc()))
    packages = {p.id.name() for p in meta.packages}
    assert packages == {m.name() for m in meta.workspace_members}
    assert meta.resolve is None


def test_full_has_resolve():
    doc = _no_deps_doc()
    alpha, beta = (p["id"] for p in doc["packages"])
    doc["resolve"] = {
        "nodes": [
            {"id": alpha, "dependencies": [beta]},
            {"id": beta, "dependencies": []},
        ]
    }
    meta = Metadata.from_json(doc)
    assert meta.resolve is not None
    assert [n.id.name() for n in meta.resolve.nodes] == ["alpha", "beta"]
    assert meta.resolve.nodes[0].dependencies == [PackageId(beta)]


def test_package_id_name():
    assert PackageId("regex 1.0.5 (registry)").name() == "regex"


def test_package_id_without_space_raises():
    with pytest.raises(ValueError):
        PackageId("regex").name()


@pytest.mark.parametrize(
    "kinds, expected",
    [
        (["lib"], True),
        (["rlib"], True),
        (["dylib"], True),
        (["proc-macro"], True),
        (["bin"], False),
        (["bin", "cdylib"], False),
        (["bin", "lib"], True),
    ],
)
def test_target_is_lib(kinds, expected):
    assert Target.from_json(_target("t", kinds)).is_lib() is expected


def test_target_edition_defaults_to_2015():
    target = Target.from_json(_target("t"))
    assert target.edition == "2015"
    assert target.is_2015()
    assert not Target.from_json(_target("t", edition="2018")).is_2015()


def test_target_strings_are_interned():
    name = "".join(["meta", "-interned"])
    target = Target.from_json(_target(name))
    assert target.name is intern("meta-interned")
    assert target.src_path == Path(f"/work/{name}/src/lib.rs")


def test_package_edition_default():
    data = _package("gamma")
    del data["edition"]
    assert Package.from_json(data).edition == "2015"


def test_workspace_root_defaults_to_empty():
    doc = _no_deps_doc()
    del doc["workspace_root"]
    assert Metadata.from_json(doc).workspace_root == Path("")


def test_missing_required_field_raises():
    doc = _no_deps_doc()
    del doc["target_directory"]
    with pytest.raises(ValueError):
        Metadata.from_json(doc)


def test_missing_resolve_key_raises():
    doc = _no_deps_doc()
    del doc["resolve"]
    with pytest.raises(ValueError):
        Metadata.from_json(doc)


def test_bad_types_raise():
    with pytest.raises(ValueError):
        ResolveNode.from_json({"id": 3, "dependencies": []})
    with pytest.raises(ValueError):
        Resolve.from_json({"nodes": "none"})


def test_invalid_json_raises():
    with pytest.raises(ValueError):
        parse_metadata("{not json")