"""Miscellaneous static scanners.

Most of these are abstract scanners: they scan one textual form and
produce a value of another type (``Hex`` scans hex digits into an ``int``,
``Word`` scans word characters into a ``str``). Use them where the default
scanner of the result type reads the wrong syntax.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from typing import ClassVar

from scanrules.constants import LINE_BREAK_CHARS, LINE_BREAKS
from scanrules.diagnostics import ScanError
from scanrules.scanner.escapes import parse_escape_sequence
from scanrules.scanner.protocol import (
    ScanFromStr,
    Scanner,
    StaticScanner,
    match_prefix,
    resolve_scanner,
)
from scanrules.syntax.cursor import Cursor

__all__ = [
    "Binary",
    "Everything",
    "Hex",
    "HorSpace",
    "Ident",
    "Inferred",
    "KeyValuePair",
    "Line",
    "Newline",
    "NonSpace",
    "Number",
    "Octal",
    "QuotedString",
    "Space",
    "Word",
    "Wordish",
]

_BINARY_RE = re.compile(r"[01]+")
_OCTAL_RE = re.compile(r"[0-7]+")
_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_IDENT_RE = re.compile(r"[^\W\d]\w*")
_LINE_RE = re.compile(r"(.*?)(\r\n|\n|\r|$)")
_NONSPACE_RE = re.compile(r"\S+")
_NUMBER_RE = re.compile(r"\d+")
_SPACE_RE = re.compile(r"\s+")
_WORD_RE = re.compile(r"\w+")
_WORDISH_RE = re.compile(r"\d+|\w+|\S")


# ============================================================================
# INTEGERS IN OTHER BASES
# ============================================================================


class Binary(StaticScanner[int]):
    """Scans binary digits into an int. No prefix, no sign.

    Example:
        >>> Binary.scan_from("0110 rest")
        (6, 4)
        >>> Binary.scan_from("0b1")  # the prefix is not binary
        (0, 1)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[int, int]:
        digits, consumed = match_prefix(_BINARY_RE, text, "expected binary digits")
        return (int(digits, 2), consumed)


class Octal(StaticScanner[int]):
    """Scans octal digits into an int. No prefix, no sign."""

    @classmethod
    def scan_from(cls, text: str) -> tuple[int, int]:
        digits, consumed = match_prefix(_OCTAL_RE, text, "expected octal digits")
        return (int(digits, 8), consumed)


class Hex(StaticScanner[int]):
    """Scans hexadecimal digits (either case) into an int. No prefix, no sign.

    Example:
        >>> Hex.scan_from("ff00z")
        (65280, 4)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[int, int]:
        digits, consumed = match_prefix(_HEX_RE, text, "expected hex digits")
        return (int(digits, 16), consumed)


# ============================================================================
# STRINGS
# ============================================================================


class Everything(StaticScanner[str]):
    """Scans all remaining input, which may be empty. Nothing is skipped.

    A rule's ``remainder()`` term is usually the better fit; this scanner
    exists for places where a tail term is not allowed, such as inside a
    width-bounded scanner.
    """

    wants_leading_junk_stripped: ClassVar[bool] = False

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        return (text, len(text))


class Ident(StaticScanner[str]):
    """Scans a Python identifier (XID_Start or "_", then XID_Continue).

    Example:
        >>> Ident.scan_from("two_words here")
        ('two_words', 9)
        >>> Ident.scan_from("f(blah)")
        ('f', 1)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        m = _IDENT_RE.match(text)
        if m is None:
            raise ScanError.syntax()
        word = m.group(0)
        # \w admits a few characters XID_Continue does not
        while word and not word.isidentifier():
            word = word[:-1]
        if not word:
            raise ScanError.syntax()
        return (word, len(word))


class Line(StaticScanner[str]):
    """Scans up to the end of the line.

    The line terminator (``\\n``, ``\\r\\n`` or ``\\r``) is consumed but not
    included in the result. The last line need not be terminated.

    Example:
        >>> Line.scan_from("first\\r\\nsecond")
        ('first', 7)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        m = _LINE_RE.match(text)
        if m is None:  # pragma: no cover - the pattern matches any text
            raise ScanError.syntax("line scanning regex failed to match anything")
        return (m.group(1), m.end())


class NonSpace(StaticScanner[str]):
    """Scans a run of non-whitespace characters."""

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        return match_prefix(_NONSPACE_RE, text, "expected at least one non-space character")


class Number(StaticScanner[str]):
    """Scans a run of decimal digits as a string (any Unicode Nd digit)."""

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        return match_prefix(_NUMBER_RE, text, "expected a number")


class Word(StaticScanner[str]):
    """Scans a run of word characters (``\\w+``). The default ``str`` scanner.

    Example:
        >>> Word.scan_from("hello, world")
        ('hello', 5)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        return match_prefix(_WORD_RE, text, "expected a word")


class Wordish(StaticScanner[str]):
    """Scans a run of digits, a run of word characters, or one other character.

    Example:
        >>> Wordish.scan_from("123abc")
        ('123', 3)
        >>> Wordish.scan_from("+12")
        ('+', 1)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        return match_prefix(_WORDISH_RE, text, "expected a word, number or some other character")


class QuotedString(StaticScanner[str]):
    """Scans a double-quoted string, decoding escape sequences.

    Reads the format ``repr()`` produces for strings in double quotes, and
    Rust-style ``\\u{...}`` escapes. The quotes are removed.

    Example:
        >>> QuotedString.scan_from('"ab\\\\"cd" xyz')
        ('ab"cd', 8)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        if not text:
            raise ScanError.syntax("expected quoted string")
        if text[0] != '"':
            raise ScanError.syntax('expected `"` for quoted string')

        chars: list[str] = []
        pos = 1
        while True:
            if pos >= len(text):
                raise ScanError.syntax("unterminated quoted string")
            ch = text[pos]
            if ch == '"':
                return ("".join(chars), pos + 1)
            if ch == "\\":
                decoded, pos = parse_escape_sequence(text, pos + 1)
                chars.append(decoded)
            else:
                chars.append(ch)
                pos += 1


# ============================================================================
# WHITESPACE
# ============================================================================


class Space(StaticScanner[str]):
    """Scans a non-empty run of whitespace, line breaks included.

    Leading whitespace is not skipped before this scanner runs.
    """

    wants_leading_junk_stripped: ClassVar[bool] = False

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        return match_prefix(_SPACE_RE, text, "expected space")


class HorSpace(StaticScanner[str]):
    """Scans a non-empty run of whitespace that does not break the line."""

    wants_leading_junk_stripped: ClassVar[bool] = False

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        end = 0
        while end < len(text) and text[end].isspace() and text[end] not in LINE_BREAK_CHARS:
            end += 1
        if end == 0:
            raise ScanError.syntax("expected horizontal space")
        return (text[:end], end)


class Newline(StaticScanner[str]):
    """Scans exactly one line break (``\\r\\n`` counts as one)."""

    wants_leading_junk_stripped: ClassVar[bool] = False

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        for brk in LINE_BREAKS:
            if text.startswith(brk):
                return (brk, len(brk))
        raise ScanError.syntax("expected line break")


# ============================================================================
# COMPOSITE
# ============================================================================


class Inferred[T](Scanner[T]):
    """Scans whatever the default scanner for ``tp`` scans.

    Resolution happens at scan time, so a scanner registered after the
    rule was built is still used.

    Example:
        >>> Inferred(int).scan_from("12 monkeys")
        (12, 2)
    """

    __slots__ = ("tp",)

    def __init__(self, tp: type[T]) -> None:
        self.tp = tp

    def scan_from(self, text: str) -> tuple[T, int]:
        return resolve_scanner(self.tp).scan_from(text)  # type: ignore[return-value]

    def __repr__(self) -> str:
        """Return debug representation."""
        return f"Inferred({self.tp.__name__})"


class KeyValuePair[K, V](Scanner[tuple[K, V]]):
    """Scans ``key: value`` into a ``(key, value)`` tuple.

    Args:
        key: Capture target for the key (scanner or registered type)
        value: Capture target for the value

    Example:
        >>> KeyValuePair(Word, int).scan_from("width: 80, height: 24")
        (('width', 80), 9)
    """

    __slots__ = ("key", "value")

    def __init__(self, key: object = Word, value: object = Word) -> None:
        self.key: ScanFromStr[K] = resolve_scanner(key)  # type: ignore[assignment]
        self.value: ScanFromStr[V] = resolve_scanner(value)  # type: ignore[assignment]

    def scan_from(self, text: str) -> tuple[tuple[K, V], int]:
        cursor = Cursor(text)
        key, cursor = cursor.try_scan(self.key)
        cursor = cursor.try_match_literal(":")
        value, cursor = cursor.try_scan(self.value)
        return ((key, value), cursor.offset)

    def __repr__(self) -> str:
        """Return debug representation."""
        return f"KeyValuePair({self.key!r}, {self.value!r})"

