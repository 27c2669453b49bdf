"""Split source text into chunks of code, skipping comments and literals.

Offsets are byte offsets into the UTF-8 encoding of the source.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto


@dataclass(frozen=True, order=True)
class ByteRange:
    """A half-open range ``[start, end)`` of byte offsets."""

    start: int
    end: int


class _State(Enum):
    CODE = auto()
    COMMENT = auto()
    COMMENT_BLOCK = auto()
    STRING = auto()
    CHAR = auto()
    FINISHED = auto()


class _Scanner:
    """State machine walking the source and producing code ranges."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0
        self.state = _State.CODE
        # None for a normal string, otherwise the number of '#'s of a raw string
        self.raw_level: int | None = None

    def next_chunk(self) -> ByteRange:
        state = self.state
        if state is _State.CODE:
            return self._code()
        if state is _State.COMMENT:
            return self._comment()
        if state is _State.COMMENT_BLOCK:
            return self._comment_block()
        if state is _State.STRING:
            return self._string()
        if state is _State.CHAR:
            return self._char()
        raise StopIteration

    def _code(self) -> ByteRange:
        data = self.data
        length = len(data)
        pos = self.pos
        # include the closing quote of the literal just skipped
        start = pos - 1 if self.state in (_State.STRING, _State.CHAR) else pos
        while pos < length:
            b = data[pos]
            pos += 1
            if b == 0x2F and length > pos:  # '/'
                following = data[pos]
                if following == 0x2F:
                    self.state = _State.COMMENT
                    self.pos = pos + 1
                    return ByteRange(start, pos - 1)
                if following == 0x2A:
                    self.state = _State.COMMENT_BLOCK
                    self.pos = pos + 1
                    return ByteRange(start, pos - 1)
            elif b == 0x22:  # '"'
                self.raw_level = self._detect_str_type(pos)
                self.state = _State.STRING
                self.pos = pos
                return ByteRange(start, pos)
            elif b == 0x27:  # '\''
                # a quote also starts lifetimes: require an escape or a closing quote
                if length > pos + 1 and (data[pos] == 0x5C or data[pos + 1] == 0x27):
                    self.state = _State.CHAR
                    self.pos = pos
                    return ByteRange(start, pos)
        self.state = _State.FINISHED
        return ByteRange(start, length)

    def _comment(self) -> ByteRange:
        data = self.data
        length = len(data)
        pos = self.pos
        while pos < length:
            b = data[pos]
            pos += 1
            if b == 0x0A:
                if data[pos:pos + 2] == b"//":
                    continue
                break
        self.pos = pos
        return self._code()

    def _comment_block(self) -> ByteRange:
        data = self.data
        length = len(data)
        nesting = 0
        prev = 0x20
        pos = self.pos
        while pos < length:
            b = data[pos]
            pos += 1
            if b == 0x2F and prev == 0x2A:
                prev = 0x20
                if nesting == 0:
                    break
                nesting -= 1
            elif b == 0x2A and prev == 0x2F:
                prev = 0x20
                nesting += 1
            else:
                prev = b
        self.pos = pos
        return self._code()

    def _string(self) -> ByteRange:
        data = self.data
        level = self.raw_level
        if level is not None:
            self.pos = self._raw_string_end(level)
        else:
            self.pos = self._quoted_end(self.pos, 0x22)
        return self._code()

    def _raw_string_end(self, level: int) -> int:
        data = self.data
        sharps: int | None = None  # None: no preceding quote
        quote_pos = 0
        for i, b in enumerate(data[self.pos:]):
            if sharps is not None:
                if b == 0x23:
                    sharps += 1
                elif b == 0x22:
                    sharps = 0
                    quote_pos = i
                else:
                    sharps = None
            elif b == 0x22:
                sharps = 0
                quote_pos = i
            if sharps == level:
                return self.pos + quote_pos + 1
        return len(data)

    def _quoted_end(self, pos: int, quote: int) -> int:
        data = self.data
        length = len(data)
        not_escaped = True
        while pos < length:
            b = data[pos]
            pos += 1
            if b == quote and not_escaped:
                break
            if b == 0x5C:
                not_escaped = not not_escaped
            else:
                not_escaped = True
        return pos

    def _char(self) -> ByteRange:
        self.pos = self._quoted_end(self.pos, 0x27)
        return self._code()

    def _detect_str_type(self, pos: int) -> int | None:
        if pos == 0:
            return None
        sharps = 0
        # pos is one past the opening quote
        for b in reversed(self.data[:pos - 1]):
            if b == 0x23:
                sharps += 1
            elif b == 0x72:  # 'r'
                return sharps
            else:
                return None
        return None


def code_chunks(src: str | bytes) -> Iterator[ByteRange]:
    """Yield the byte ranges of code in ``src``, minus comments and literal contents."""
    data = src.encode("utf-8") if isinstance(src, str) else bytes(src)
    scanner = _Scanner(data)
    while scanner.state is not _State.FINISHED:
        yield scanner.next_chunk()