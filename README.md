# racerkit

Pieces for building a Rust code-completion tool in Python. Only the standard library is
needed at run time.

## Modules

- **`racerkit.interner`**: a per-thread string interner. `intern(text)` returns one
  canonical object for equal strings within a thread; `lookup_interned(text)` returns that
  object only if the string was interned before, otherwise `None`.
- **`racerkit.metadata`**: data classes for the JSON printed by
  `cargo metadata --format-version 1`: `Metadata`, `Package`, `Target`, `Resolve`,
  `ResolveNode` and `PackageId`, each with a `from_json` class method, plus
  `parse_metadata(text)`. Missing or ill-typed fields raise `ValueError`. Editions default
  to `"2015"`. `PackageId.name()` returns the part before the first space.
  `Target.is_lib()` is true for the kinds `lib`, `rlib`, `dylib` and `proc-macro`.
- **`racerkit.mapping`**: `Edition` (2015, 2018, 2021; any other string raises
  `ValueError`) and `PackageMap`. The map indexes packages by position, by `PackageId`
  and by manifest path, and records each package's library target and the library targets
  of its resolved dependencies.
- **`racerkit.cargo`**: `find_manifest(path)` finds the nearest `Cargo.toml` at or above a
  path. `run(manifest_path, frozen)` calls `cargo metadata` and parses its output. The
  program is taken from `$CARGO`, or `cargo` if that is unset. Failures raise
  `MetadataError`. A non-zero exit raises its subclass `SubprocessError`, which carries
  the `stderr` text.
- **`racerkit.codecleaner`**: `code_chunks(src)` yields `ByteRange(start, end)` byte
  ranges of the UTF-8 source that are code. It skips `//` and nested `/* */` comments and
  the contents of string, raw-string and character literals.
- **`racerkit.types`**: models of paths (`Path`, `PathSegment`, `PathPrefix`,
  `PathSearch`), types (`Ty` and its subclasses `TyMatch`, `TyPathSearch`, `TyTuple`,
  `TyArray`, `TyRefPtr`, `TySlice`, `TyPtr`, `TyTraitObject`, `TySelf`, `TyFuture`,
  `TyNever`, `TyDefault`, `TyUnsupported`), generics (`TypeParameter`, `GenericsArgs`),
  trait bounds (`TraitBounds`), and `Match`, `Scope` and `Mutability`.
- **`racerkit.patterns`**: pattern models (`Pat`, `PatWild`, `PatIdent`, `PatStruct`,
  `PatTupleStruct`, `PatPath`, `PatTuple`, `PatRef`, `PatOther`, `FieldPat`,
  `BindingMode`). `Pat.search_by_name(name, search_type)` finds a bound identifier using a
  `SearchType`, either `EXACT_MATCH` or `STARTS_WITH`. It also models the leaves of `use`
  trees (`PathAliasKind`, `PathAlias`).
- **`racerkit.cli`**: the line-oriented output protocol and argument parsing:
  - `Interface` (`TEXT` or `TAB_TEXT`) formats the messages `End`, `Prefix`, `Point`,
    `Coords`, `MatchMessage` and `MatchWithSnippet` with `format`, or writes them with
    `emit`.
  - `build_parser()` builds an `argparse` parser for the subcommands `complete`,
    `complete-with-snippet`, `find-definition`, `prefix`, `point`, `coord` and `daemon`.
  - `parse_command(argv)` returns the subcommand name and a `Config`. Invalid arguments
    exit with a usage message.
  - `split_daemon_line(line, interface)` splits one line of daemon input: on whitespace in
    text mode, on tabs in tab-text mode.

## Usage

### Reading cargo metadata

```python
from racerkit.cargo import find_manifest, run
from racerkit.mapping import PackageMap

manifest = find_manifest("some/crate/src/lib.rs")
meta = run(manifest, False)
packages = PackageMap.from_metadata(meta)

regex = next(pid for pid in packages.ids() if pid.name() == "regex")
idx = packages.id_to_idx(regex)
print(packages.get_edition(idx))
print(packages.get_src_path_from_libname(idx, "memchr"))
```

If you already hold the JSON text, `racerkit.metadata.parse_metadata(text)` returns the
same `Metadata` object without running cargo.

`get_src_path_from_libname` looks names up through the interner. A library name that was
never interned in the current thread, for example through parsing metadata, gives `None`.

### Splitting source into code chunks

```python
from racerkit.codecleaner import code_chunks

src = 'let s = "a // not a comment"; // a comment\nlet t = 1;'
data = src.encode()
for chunk in code_chunks(src):
    print(data[chunk.start:chunk.end])
```

Comments are dropped entirely. String and char literals keep their quotes but lose their
contents.

### Paths and types

```python
from racerkit.types import Path

path = Path.from_vec(False, ["self", "collections", "HashMap"])
print(path.prefix, path.name(), str(path))   # PathPrefix.SELF HashMap collections::HashMap
```

### Arguments and output

```python
from racerkit.cli import Coordinate, Coords, End, Interface, parse_command

command, cfg = parse_command(["point", "10", "4", "src/lib.rs"])
print(command, cfg.coords())                          # point Coordinate(row=10, col=4)

interface = Interface.parse("tab-text")
print(interface.format(Coords(Coordinate(10, 4))))    # COORD\t10\t4
print(interface.format(End()))                        # END
```

## What this package does not do

racerkit has no completion or definition-search engine. Nothing here resolves names,
infers types, or finds matches in source files. It also installs no command-line program:
`racerkit.cli` parses arguments and formats output lines, but no function in the package
carries out the subcommands or runs a daemon loop.