"""Comparison, whitespace and word-slicing policies for literal matching.

A cursor carries a ScanPolicy bundling three stateless strategies:

    compare: when are two words equal?
    space:   how is whitespace skipped and matched?
    words:   where does one word end?

All strategies are frozen, slot-only dataclasses without fields, so every
instance of a policy class is interchangeable with every other.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, replace
from typing import Protocol

from scanrules.constants import LINE_BREAK_CHARS, LINE_BREAKS, WORD_EXTRA_CATEGORIES

__all__ = [
    "DEFAULT_POLICY",
    "ComparePolicy",
    "ExactCompare",
    "ExactSpace",
    "FuzzySpace",
    "IgnoreAsciiCase",
    "IgnoreCase",
    "IgnoreCaseNormalized",
    "IgnoreNonLine",
    "IgnoreSpace",
    "NonSpace",
    "Normalized",
    "ScanPolicy",
    "SpacePolicy",
    "WordPolicy",
    "Wordish",
    "is_word_char",
    "split_line_breaks",
]


# ============================================================================
# PROTOCOLS
# ============================================================================


# pylint: disable=unnecessary-ellipsis
class ComparePolicy(Protocol):
    """Decides whether an input word equals a pattern word."""

    def compare(self, a: str, b: str) -> bool:
        """Return True if ``a`` and ``b`` should be considered equal."""
        ...


class SpacePolicy(Protocol):
    """Decides how whitespace is skipped and matched."""

    def skip_leading(self, text: str, start: int = 0) -> int:
        """Return the number of characters to skip at ``start`` before a token."""
        ...

    def match_leading(
        self, text: str, pattern: str, text_start: int = 0, pattern_start: int = 0
    ) -> tuple[int, int] | None:
        """Match the whitespace run of ``text`` against that of ``pattern``.

        Returns:
            ``(consumed_from_text, consumed_from_pattern)`` on success,
            None if the runs disagree.
        """
        ...


class WordPolicy(Protocol):
    """Decides where the next word ends."""

    def slice_word(self, text: str, start: int = 0) -> int | None:
        """Return the length of the word at ``start`` in ``text``.

        Returns None at the end of ``text`` or at whitespace.
        """
        ...
# pylint: enable=unnecessary-ellipsis


# ============================================================================
# CHARACTER CLASSES
# ============================================================================


def is_word_char(ch: str) -> bool:
    """Check if a character continues a literal word.

    Word characters are letters, digits, "_", combining marks and connector
    punctuation. Marks are included so that a base letter followed by a
    combining accent forms one word, which Normalized comparison relies on.
    """
    return ch.isalnum() or ch == "_" or unicodedata.category(ch) in WORD_EXTRA_CATEGORIES


def _space_run(text: str, start: int) -> int:
    """Count whitespace characters starting at ``start``."""
    end = start
    while end < len(text) and text[end].isspace():
        end += 1
    return end - start


def _horizontal_space_run(text: str, start: int) -> int:
    """Count whitespace characters starting at ``start`` that do not break a line."""
    end = start
    while end < len(text) and text[end].isspace() and text[end] not in LINE_BREAK_CHARS:
        end += 1
    return end - start


def split_line_breaks(run: str) -> tuple[str, ...]:
    """Extract the line break sequences from a whitespace run.

    ``"\\r\\n"`` counts as one break.

    Example:
        >>> split_line_breaks(" \\r\\n \\t\\n")
        ('\\r\\n', '\\n')
    """
    breaks: list[str] = []
    i = 0
    while i < len(run):
        for brk in LINE_BREAKS:
            if run.startswith(brk, i):
                breaks.append(brk)
                i += len(brk)
                break
        else:
            i += 1
    return tuple(breaks)


# ============================================================================
# COMPARISON POLICIES
# ============================================================================


_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    "abcdefghijklmnopqrstuvwxyz",
)


@dataclass(frozen=True, slots=True)
class ExactCompare:
    """Exact, code point for code point comparison (the default)."""

    def compare(self, a: str, b: str) -> bool:
        return a == b


@dataclass(frozen=True, slots=True)
class IgnoreAsciiCase:
    """ASCII case-insensitive comparison.

    Only A-Z and a-z are folded. Non-ASCII letters must match exactly, which
    is only correct for ASCII text but is easy to predict.
    """

    def compare(self, a: str, b: str) -> bool:
        return len(a) == len(b) and a.translate(_ASCII_LOWER) == b.translate(_ASCII_LOWER)


@dataclass(frozen=True, slots=True)
class IgnoreCase:
    """Unicode case-insensitive comparison using full case folding."""

    def compare(self, a: str, b: str) -> bool:
        return a.casefold() == b.casefold()


@dataclass(frozen=True, slots=True)
class Normalized:
    """Canonical equivalence: compares the NFD forms of both words.

    Precomposed "é" (U+00E9) equals "e" followed by U+0301.
    """

    def compare(self, a: str, b: str) -> bool:
        return unicodedata.normalize("NFD", a) == unicodedata.normalize("NFD", b)


@dataclass(frozen=True, slots=True)
class IgnoreCaseNormalized:
    """Canonical caseless matching: NFD(casefold(NFD(x)))."""

    def compare(self, a: str, b: str) -> bool:
        return _canonical_caseless(a) == _canonical_caseless(b)


def _canonical_caseless(text: str) -> str:
    return unicodedata.normalize("NFD", unicodedata.normalize("NFD", text).casefold())


# ============================================================================
# WHITESPACE POLICIES
# ============================================================================


@dataclass(frozen=True, slots=True)
class IgnoreSpace:
    """Skip all whitespace; any two whitespace runs match (the default).

    Literal "a b" matches "a b", "a    b" and "a\\tb" alike.
    """

    def skip_leading(self, text: str, start: int = 0) -> int:
        return _space_run(text, start)

    def match_leading(
        self, text: str, pattern: str, text_start: int = 0, pattern_start: int = 0
    ) -> tuple[int, int] | None:
        return (_space_run(text, text_start), _space_run(pattern, pattern_start))


@dataclass(frozen=True, slots=True)
class ExactSpace:
    """Whitespace is never skipped and runs must be identical.

    A pattern that ends in whitespace only requires the input run to start
    with that whitespace, so adjacent literals " " and "\\t" together match
    the input run " \\t".
    """

    def skip_leading(self, text: str, start: int = 0) -> int:
        return 0

    def match_leading(
        self, text: str, pattern: str, text_start: int = 0, pattern_start: int = 0
    ) -> tuple[int, int] | None:
        text_run = _space_run(text, text_start)
        pattern_run = _space_run(pattern, pattern_start)
        pattern_ws = pattern[pattern_start : pattern_start + pattern_run]
        if pattern_start + pattern_run == len(pattern):
            if text.startswith(pattern_ws, text_start):
                return (pattern_run, pattern_run)
            return None
        if text[text_start : text_start + text_run] == pattern_ws:
            return (text_run, pattern_run)
        return None


@dataclass(frozen=True, slots=True)
class FuzzySpace:
    """Whitespace is never skipped; runs match if both or neither are empty.

    The amount and kind of whitespace is irrelevant, only its presence.
    """

    def skip_leading(self, text: str, start: int = 0) -> int:
        return 0

    def match_leading(
        self, text: str, pattern: str, text_start: int = 0, pattern_start: int = 0
    ) -> tuple[int, int] | None:
        text_run = _space_run(text, text_start)
        pattern_run = _space_run(pattern, pattern_start)
        if (text_run == 0) != (pattern_run == 0):
            return None
        return (text_run, pattern_run)


@dataclass(frozen=True, slots=True)
class IgnoreNonLine:
    """Skip horizontal whitespace; line breaks must match exactly.

    Scanners do not skip past a line break, so a repetition of values on one
    line stops at the end of the line.
    """

    def skip_leading(self, text: str, start: int = 0) -> int:
        return _horizontal_space_run(text, start)

    def match_leading(
        self, text: str, pattern: str, text_start: int = 0, pattern_start: int = 0
    ) -> tuple[int, int] | None:
        text_run = _space_run(text, text_start)
        pattern_run = _space_run(pattern, pattern_start)
        text_breaks = split_line_breaks(text[text_start : text_start + text_run])
        pattern_breaks = split_line_breaks(pattern[pattern_start : pattern_start + pattern_run])
        if text_breaks != pattern_breaks:
            return None
        return (text_run, pattern_run)


# ============================================================================
# WORD POLICIES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Wordish:
    """A run of word characters, or else one non-space character (the default)."""

    def slice_word(self, text: str, start: int = 0) -> int | None:
        if start >= len(text) or text[start].isspace():
            return None
        if not is_word_char(text[start]):
            return 1
        end = start + 1
        while end < len(text) and is_word_char(text[end]):
            end += 1
        return end - start


@dataclass(frozen=True, slots=True)
class NonSpace:
    """A maximal run of non-whitespace characters.

    Literal "a,c*e" is one word under this policy, so it only matches input
    with no whitespace inside that run.
    """

    def slice_word(self, text: str, start: int = 0) -> int | None:
        end = start
        while end < len(text) and not text[end].isspace():
            end += 1
        return (end - start) or None


# ============================================================================
# POLICY BUNDLE
# ============================================================================


@dataclass(frozen=True, slots=True)
class ScanPolicy:
    """The three strategies a cursor uses to match literals.

    Attributes:
        compare: Word comparison strategy
        space: Whitespace strategy (also decides what scanners skip)
        words: Word slicing strategy

    Example:
        >>> policy = ScanPolicy(compare=IgnoreAsciiCase())
        >>> policy.compare.compare("Foo", "foo")
        True
        >>> policy.with_space(ExactSpace()).space
        ExactSpace()
    """

    compare: ComparePolicy = ExactCompare()
    space: SpacePolicy = IgnoreSpace()
    words: WordPolicy = Wordish()

    def with_compare(self, compare: ComparePolicy) -> ScanPolicy:
        """Return a copy using a different comparison strategy."""
        return replace(self, compare=compare)

    def with_space(self, space: SpacePolicy) -> ScanPolicy:
        """Return a copy using a different whitespace strategy."""
        return replace(self, space=space)

    def with_words(self, words: WordPolicy) -> ScanPolicy:
        """Return a copy using a different word slicing strategy."""
        return replace(self, words=words)


DEFAULT_POLICY: ScanPolicy = ScanPolicy()
