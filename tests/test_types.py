from pathlib import Path as FilePath

import pytest

from racerkit.types import (
    GenericsArgs,
    Match,
    Mutability,
    Path,
    PathPrefix,
    PathSearch,
    PathSegment,
    Scope,
    TraitBounds,
    TyArray,
    TyDefault,
    TyFuture,
    TyMatch,
    TyNever,
    TyPathSearch,
    TyPtr,
    TyRefPtr,
    TySelf,
    TySlice,
    TyTraitObject,
    TyTuple,
    TypeParameter,
    TyUnsupported,
)

FILE = FilePath("lib.rs")


def search(*names, generics=None):
    path = Path.from_iter(False, names)
    if generics:
        path.segments[-1].generics = list(generics)
    return PathSearch(path, FILE, 0)


def pty(*names, generics=None):
    return TyPathSearch(search(*names, generics=generics))


def param(name, resolved=None, bounds=None):
    return TypeParameter(name, 3, FILE, bounds or TraitBounds(), resolved)


def test_path_prefix_from_str():
    assert PathPrefix.from_str("crate") is PathPrefix.CRATE
    assert PathPrefix.from_str("{{root}}") is PathPrefix.GLOBAL
    assert PathPrefix.from_str("std") is None


def test_from_iter_detects_leading_prefix():
    path = Path.from_iter(False, ["self", "abc"])
    assert path.prefix is PathPrefix.SELF
    assert [s.name for s in path.segments] == ["abc"]


def test_from_iter_global_keeps_first_segment():
    path = Path.from_vec(True, ["super", "abc"])
    assert path.prefix is PathPrefix.GLOBAL
    assert [s.name for s in path.segments] == ["super", "abc"]


def test_set_prefix_moves_keyword():
    path = Path(None, [PathSegment("crate"), PathSegment("foo")])
    path.set_prefix()
    assert path.prefix is PathPrefix.CRATE
    assert path.name() == "foo"
    path.set_prefix()
    assert path.name() == "foo" and len(path.segments) == 1


def test_extend_returns_self_and_appends():
    path = Path.from_iter(False, ["std"])
    result = path.extend(Path.from_iter(False, ["io"]))
    assert result is path
    assert str(path) == "std::io"


def test_single_and_name():
    path = Path.single(PathSegment("Vec"))
    assert path.is_single()
    assert path.name() == "Vec"
    assert Path().name() is None


def test_display_with_generics():
    path = Path.from_iter(False, ["std", "vec", "Vec"])
    path.segments[-1].generics = [pty("T"), pty("U")]
    assert str(path) == "std::vec::Vec<T, U>"
    assert list(path.generic_types()) == [pty("T"), pty("U")]


def test_debug_repr_plain():
    assert Path.from_iter(False, ["a", "b"]).debug_repr() == "P[a::b]"


def test_debug_repr_with_output_has_arrow():
    path = Path.single(PathSegment("Fn", [], TyDefault()))
    text = path.debug_repr()
    assert text.startswith("P[Fn(")
    assert ")->" in text and text.endswith("]")


def test_ty_display():
    assert str(TyRefPtr(pty("Foo"), Mutability.MUT)) == "&mut Foo"
    assert str(TyRefPtr(pty("Foo"))) == "&Foo"
    assert str(TyPtr(pty("Foo"), Mutability.NOT)) == "*const Foo"
    assert str(TyPtr(pty("Foo"), Mutability.MUT)) == "*mut Foo"
    assert str(TySlice(pty("u8"))) == "[u8]"
    assert str(TyArray(pty("u8"), "4")) == "[u8; 4]"
    assert str(TyTuple([pty("A"), None])) == "(A, UNKNOWN)"
    assert str(TyNever()) == "!"
    assert str(TyDefault()) == "()"
    assert str(TyUnsupported()) == "_"
    assert str(TySelf(Scope(FILE, 0))) == "Self"
    assert str(TyFuture(pty("u8"), Scope(FILE, 0))) == "impl Future<Output=u8>"


def test_trait_object_display():
    bounds = TraitBounds([search("Debug"), search("Clone")])
    assert str(TyTraitObject(bounds)) == "<Debug,Clone>"


def test_dereference_strips_all_refs():
    inner = pty("Foo")
    ty = TyRefPtr(TyRefPtr(inner, Mutability.MUT))
    assert ty.dereference() == inner
    assert inner.dereference() is inner


def test_trait_bounds_closure_detection():
    bounds = TraitBounds([search("Debug"), search("FnMut")])
    assert bounds.has_closure()
    assert bounds.get_closure().path.name() == "FnMut"
    assert not TraitBounds([search("std", "ops", "Fn")]).has_closure()


def test_trait_bounds_find_and_extend():
    bounds = TraitBounds([search("Debug")])
    bounds.extend(TraitBounds([search("Clone")]))
    assert len(bounds) == 2
    assert bounds.find_by_name("Clone") == search("Clone")
    assert bounds.find_by_name("Copy") is None


def test_type_parameter_add_bound_skips_duplicates():
    tp = param("T", bounds=TraitBounds([search("Debug")]))
    tp.add_bound(TraitBounds([search("Debug"), search("Clone")]))
    assert [ps.path.name() for ps in tp.bounds] == ["Debug", "Clone"]


def test_type_parameter_into_match():
    bounds = TraitBounds([search("Clone")])
    m = param("T", bounds=bounds).into_match()
    assert m.matchstr == "T"
    assert m.mtype == "TypeParameter"
    assert m.bounds == bounds
    assert m.point == 3 and m.filepath == FILE


def test_generics_search_and_idents():
    gen = GenericsArgs([param("T"), param("U")])
    assert gen.get_idents() == ["T", "U"]
    idx, found = gen.search_param_by_path(Path.from_iter(False, ["U"]))
    assert idx == 1 and found.name == "U"
    assert gen.search_param_by_path(Path.from_iter(False, ["a", "U"])) is None
    assert gen.search_param_by_name("V") is None
    assert gen.get_tbound_match("T").matchstr == "T"
    assert gen.get_tbound_match("V") is None


def test_generics_apply_types_and_add_bound():
    gen = GenericsArgs([param("T"), param("U")])
    gen.apply_types([pty("String")])
    assert gen.params[0].resolved == pty("String")
    assert gen.params[1].resolved is None
    gen.add_bound(1, TraitBounds([search("Clone")]))
    gen.add_bound(5, TraitBounds([search("Copy")]))
    assert gen.params[1].bounds.find_by_name("Clone") is not None
    assert len(gen.params[0].bounds) == 0


def test_generics_extend():
    gen = GenericsArgs([param("T")])
    gen.extend(GenericsArgs([param("U")]))
    assert gen.get_idents() == ["T", "U"]


def test_replace_by_generics_resolved_keeps_ref_depth():
    gen = GenericsArgs([param("T", resolved=pty("String"))])
    result = TyRefPtr(TyRefPtr(pty("T"))).replace_by_generics(gen)
    assert result._deref_with_count() == (pty("String"), 2)


def test_replace_by_generics_unresolved_becomes_match():
    gen = GenericsArgs([param("T")])
    result = pty("T").replace_by_generics(gen)
    assert isinstance(result, TyMatch)
    assert result.match.matchstr == "T"
    assert result.match.mtype == "TypeParameter"


def test_replace_by_generics_nested_does_not_mutate_input():
    gen = GenericsArgs([param("T", resolved=pty("u8"))])
    original = pty("Vec", generics=[pty("T")])
    result = original.replace_by_generics(gen)
    assert str(result) == "Vec<u8>"
    assert str(original) == "Vec<T>"


def test_replace_by_resolved_generics():
    gen = GenericsArgs([param("T", resolved=pty("u8")), param("U")])
    assert TyRefPtr(pty("T")).replace_by_resolved_generics(gen) == TyRefPtr(pty("u8"))
    assert pty("U").replace_by_resolved_generics(gen) == pty("U")
    assert pty("X").replace_by_resolved_generics(gen) == pty("X")


def test_path_replace_by_bounds():
    gen = GenericsArgs([param("K"), param("V", resolved=pty("i32"))])
    path = Path.from_iter(False, ["HashMap"])
    path.segments[0].generics = [pty("K"), pty("V"), pty("Box", generics=[pty("V")])]
    path.replace_by_bounds(gen)
    first, second, third = path.segments[0].generics
    assert isinstance(first, TyMatch) and first.match.matchstr == "K"
    assert second == pty("i32")
    assert str(third) == "Box<i32>"


def test_match_defaults():
    m = Match("foo", FILE, 7)
    assert (m.local, m.coords, m.contextstr, m.bounds) == (False, None, "", None)
    assert TyMatch(m).match is m
    assert str(TyMatch(m)) == "foo"


def test_generic_types_on_empty_path_raises():
    with pytest.raises(IndexError):
        Path().generic_types()