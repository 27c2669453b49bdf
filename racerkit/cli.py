"""Command-line parsing and the line-oriented output protocol."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, TextIO, Union

_USIZE_MAX = 2**64 - 1

_DEBUG_ESCAPES = {
    "\0": "\\0",
    "\t": "\\t",
    "\r": "\\r",
    "\n": "\\n",
    "\\": "\\\\",
    '"': '\\"',
}


@dataclass(frozen=True)
class Coordinate:
    """A line and column position in a file."""

    row: int
    col: int


@dataclass(frozen=True)
class End:
    """Marks the end of a response."""


@dataclass(frozen=True)
class Prefix:
    """The identifier prefix being completed and its byte range."""

    start: int
    pos: int
    text: str


@dataclass(frozen=True)
class Point:
    """A byte offset in a file."""

    point: int


@dataclass(frozen=True)
class Coords:
    """A line and column position."""

    coords: Coordinate


@dataclass(frozen=True)
class MatchMessage:
    """A completion or definition match."""

    matchstr: str
    coords: Coordinate
    path: Path
    mtype: Any
    context: str


@dataclass(frozen=True)
class MatchWithSnippet:
    """A completion match carrying a snippet and documentation."""

    matchstr: str
    snippet: str
    coords: Coordinate
    path: Path
    mtype: Any
    context: str
    docs: str


Message = Union[End, Prefix, Point, Coords, MatchMessage, MatchWithSnippet]


def _debug_str(text: str) -> str:
    """Quote ``text`` with escapes, as a debug representation of a string."""
    out = ['"']
    for ch in text:
        escaped = _DEBUG_ESCAPES.get(ch)
        if escaped is not None:
            out.append(escaped)
        elif ch.isprintable():
            out.append(ch)
        else:
            out.append(f"\\u{{{ord(ch):x}}}")
    out.append('"')
    return "".join(out)


def _squash_whitespace(text: str) -> str:
    return " ".join(text.split())


class Interface(Enum):
    """Output mode: human-readable text or tab-separated text."""

    TEXT = "text"
    TAB_TEXT = "tab-text"

    @classmethod
    def parse(cls, value: str | None) -> Interface:
        """Interpret an ``--interface`` value; no value means text."""
        if value is None:
            return cls.TEXT
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"invalid interface mode: {value!r}") from None

    def leading_space(self) -> str:
        return " " if self is Interface.TEXT else "\t"

    def field_separator(self) -> str:
        return "," if self is Interface.TEXT else "\t"

    def format(self, message: Message) -> str:
        """Render ``message`` as one output line, without the newline."""
        text_mode = self is Interface.TEXT
        if isinstance(message, End):
            return "END"
        if isinstance(message, Prefix):
            if text_mode:
                return f"PREFIX {message.start},{message.pos},{message.text}"
            return f"PREFIX\t{message.start}\t{message.pos}\t{message.text}"
        if isinstance(message, Point):
            return f"POINT{self.leading_space()}{message.point}"
        if isinstance(message, Coords):
            cd = message.coords
            return f"COORD{self.leading_space()}{cd.row}{self.field_separator()}{cd.col}"
        if isinstance(message, MatchMessage):
            context = _squash_whitespace(message.context)
            fields = [
                message.matchstr,
                str(message.coords.row),
                str(message.coords.col),
                str(message.path),
                str(message.mtype),
                context,
            ]
            sep = "," if text_mode else "\t"
            return f"MATCH{self.leading_space()}" + sep.join(fields)
        if isinstance(message, MatchWithSnippet):
            if text_mode:
                context = _squash_whitespace(message.context.replace(";", "\\;"))
                docs = _debug_str(message.docs).replace(";", "\\;")
                sep = ";"
            else:
                context = _squash_whitespace(message.context.replace("\t", "\\t"))
                docs = _debug_str(message.docs)
                sep = "\t"
            fields = [
                message.matchstr,
                message.snippet,
                str(message.coords.row),
                str(message.coords.col),
                str(message.path),
                str(message.mtype),
                context,
                docs,
            ]
            return f"MATCH{self.leading_space()}" + sep.join(fields)
        raise TypeError(f"unknown message: {message!r}")

    def emit(self, message: Message, stream: TextIO | None = None) -> None:
        """Write ``message`` as a line to ``stream`` (standard output by default)."""
        out = sys.stdout if stream is None else stream
        out.write(self.format(message) + "\n")


def _parse_usize(value: str, name: str) -> int:
    digits = value[1:] if value.startswith("+") else value
    if not digits or not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"invalid value for '{name}': {value!r} is not a number")
    number = int(digits)
    if number > _USIZE_MAX:
        raise ValueError(f"invalid value for '{name}': {value!r} is too large")
    return number


@dataclass
class Config:
    """Parsed arguments of one command."""

    fqn: str | None = None
    linenum: int = 0
    charnum: int = 0
    fn_name: Path | None = None
    substitute_file: Path | None = None
    interface: Interface = Interface.TEXT
    point: int = 0

    def coords(self) -> Coordinate:
        return Coordinate(self.linenum, self.charnum)

    def expect_file(self) -> Path:
        if self.fn_name is None:
            raise ValueError("File path required")
        return self.fn_name

    @classmethod
    def from_args(cls, args: Any) -> Config:
        """Build a config from subcommand arguments (a namespace or a mapping)."""
        if isinstance(args, Mapping):
            def get(key: str) -> Any:
                return args.get(key)
        else:
            def get(key: str) -> Any:
                return getattr(args, key, None)

        point = get("point")
        path = get("path")
        if point is not None and path is not None:
            return cls(point=_parse_usize(point, "point"), fn_name=Path(path))

        charnum = get("charnum")
        if charnum is not None:
            substitute = get("substitute_file")
            cfg = cls(
                charnum=_parse_usize(charnum, "charnum"),
                fn_name=None if path is None else Path(path),
                substitute_file=None if substitute is None else Path(substitute),
            )
            linenum = get("linenum")
            if linenum is None:
                # the first positional doubles as the line number
                cfg.linenum = _parse_usize(get("fqn"), "fqn")
            else:
                cfg.linenum = _parse_usize(linenum, "linenum")
            return cfg

        return cls(fqn=get("fqn"))


_COMPLETE_COMMANDS = ("complete", "complete-with-snippet")


def _add_complete(subparsers: Any, name: str, help_text: str) -> None:
    sub = subparsers.add_parser(
        name,
        help=help_text,
        usage=(
            f"racer {name} <fqn>\n"
            f"       racer {name} <linenum> <charnum> <path> [substitute_file]"
        ),
    )
    sub.add_argument(
        "fqn", nargs="?", help="complete with a fully-qualified-name (e.g. std::io::)"
    )
    sub.add_argument("charnum", nargs="?", help="The char number to search for matches")
    sub.add_argument("path", nargs="?", help="The path to search for name to match")
    sub.add_argument("substitute_file", nargs="?", help="An optional substitute file")
    sub.add_argument(
        "linenum", nargs="?", help="The line number at which to find the match"
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="racer",
        description="A Rust code completion utility",
        epilog="For more information about a specific command try 'racer <command> --help'",
    )
    parser.add_argument(
        "-i",
        "--interface",
        choices=[i.value for i in Interface],
        metavar="mode",
        help="Interface mode",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    _add_complete(subparsers, "complete", "performs completion and returns matches")
    subparsers.add_parser(
        "daemon", help="start a process that receives the above commands via stdin"
    )

    find = subparsers.add_parser(
        "find-definition", help="finds the definition of a function"
    )
    find.add_argument("linenum", help="The line number at which to find the match")
    find.add_argument("charnum", help="The char number at which to find the match")
    find.add_argument("path", help="The path to search for name to match")
    find.add_argument("substitute_file", nargs="?", help="An optional substitute file")

    prefix = subparsers.add_parser("prefix")
    prefix.add_argument("linenum", help="The line number at which to find the match")
    prefix.add_argument("charnum", help="The char number at which to find the match")
    prefix.add_argument("path", help="The path to search for the match to prefix")

    _add_complete(
        subparsers,
        "complete-with-snippet",
        "performs completion and returns more detailed matches",
    )

    point = subparsers.add_parser(
        "point", help="converts linenum and charnum in a file to a point"
    )
    point.add_argument("linenum", help="The line number at which to convert to point")
    point.add_argument("charnum", help="The char number at which to convert to point")
    point.add_argument("path", help="The path where the line and char occur")

    coord = subparsers.add_parser(
        "coord", help="converts a racer point to line and character numbers"
    )
    coord.add_argument(
        "point", help="The point to convert to line and character coordinates"
    )
    coord.add_argument("path", help="The path where the line and char occur")
    return parser


def parse_command(argv: Sequence[str]) -> tuple[str, Config]:
    """Parse ``argv`` (without program name) into a command name and its config.

    Invalid arguments exit with a usage message, as argparse does.
    """
    parser = build_parser()
    args = parser.parse_args(list(argv))
    if args.command in _COMPLETE_COMMANDS:
        positionals = (args.fqn, args.charnum, args.path, args.substitute_file)
        if all(value is None for value in positionals):
            parser.error(f"{args.command}: arguments required")
        if args.charnum is not None and args.path is None:
            parser.error(f"{args.command}: argument 'charnum' requires 'path'")
    try:
        cfg = Config.from_args(args)
    except ValueError as exc:
        parser.error(str(exc))
    cfg.interface = Interface.parse(args.interface)
    return args.command, cfg


def split_daemon_line(line: str, interface: Interface) -> list[str]:
    """Split one line of daemon input into command arguments."""
    trimmed = line.rstrip()
    if interface is Interface.TAB_TEXT:
        return trimmed.split("\t")
    return trimmed.split()