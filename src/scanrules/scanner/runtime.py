"""Runtime scanners: scanners built as values and composed outside-in.

The outer scanner decides how much text the inner scanner may see, then
checks how much of it the inner scanner actually consumed:

    exact_width(n, then)   inner sees n characters and must consume all n
    max_width(n, then)     inner sees at most n characters
    min_width(n, then)     inner must consume at least n characters
    re(pattern, then)      inner sees what a regular expression matched
    until(literal, then)   inner sees the text before a literal

``then`` may be any capture target: a scanner, a scanner class or a
registered type. The ``*_a`` variants take the type first, mirroring
``scan_a``.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re as _re
from typing import TYPE_CHECKING

from scanrules.constants import SCAN_GROUP_NAME
from scanrules.diagnostics import ErrorTemplate, PatternError, ScanError
from scanrules.scanner.misc import Everything, Word
from scanrules.scanner.protocol import ScanFromStr, Scanner, convert, resolve_scanner

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "ExactWidth",
    "MaxWidth",
    "MinWidth",
    "ScanA",
    "ScanRegex",
    "Until",
    "WordAs",
    "exact_width",
    "exact_width_a",
    "max_width",
    "max_width_a",
    "min_width",
    "min_width_a",
    "re",
    "re_a",
    "re_str",
    "scan_a",
    "until",
    "word_a",
]


def _check_width(width: int) -> int:
    if width < 0:
        raise PatternError(ErrorTemplate.width_invalid(width))
    return width


def _run_inner[T](scanner: ScanFromStr[T], text: str, base: int = 0) -> tuple[T, int]:
    """Run an inner scanner on a slice starting ``base`` characters in."""
    try:
        return scanner.scan_from(text)
    except ScanError as err:
        if base == 0:
            raise
        relocated = err.add_offset(base)
        raise relocated from relocated.cause


# ============================================================================
# DELEGATION
# ============================================================================


class ScanA[T](Scanner[T]):
    """Delegates to the scanner a capture target resolves to."""

    __slots__ = ("target",)

    def __init__(self, target: object) -> None:
        self.target: ScanFromStr[T] = resolve_scanner(target)  # type: ignore[assignment]

    @property
    def wants_leading_junk_stripped(self) -> bool:  # type: ignore[override]
        """Follow the delegate."""
        return getattr(self.target, "wants_leading_junk_stripped", True)

    def scan_from(self, text: str) -> tuple[T, int]:
        return self.target.scan_from(text)

    def __repr__(self) -> str:
        """Return debug representation."""
        return f"ScanA({self.target!r})"


def scan_a(tp: object) -> ScanA[object]:
    """Return a runtime scanner that delegates to the scanner for ``tp``.

    Example:
        >>> from scanrules.scanner.misc import Hex
        >>> scan_a(Hex).scan_from("1f!")
        (31, 2)
    """
    return ScanA(tp)


class WordAs[T](Scanner[T]):
    """Scans a word, then converts it with a callable such as ``int``."""

    __slots__ = ("convert_fn",)

    def __init__(self, convert_fn: Callable[[str], T]) -> None:
        self.convert_fn = convert_fn

    def scan_from(self, text: str) -> tuple[T, int]:
        word, consumed = Word.scan_from(text)
        return (convert(self.convert_fn, word), consumed)

    def __repr__(self) -> str:
        """Return debug representation."""
        name = getattr(self.convert_fn, "__name__", repr(self.convert_fn))
        return f"WordAs({name})"


def word_a[T](convert_fn: Callable[[str], T]) -> WordAs[T]:
    """Return a scanner that converts one ``Word`` with ``convert_fn``.

    Conversion failures become OTHER scan errors.

    Example:
        >>> word_a(int).scan_from("0042 rest")
        (42, 4)
    """
    return WordAs(convert_fn)


# ============================================================================
# WIDTH BOUNDING
# ============================================================================


class _Bounded[T](Scanner[T]):
    __slots__ = ("then", "width")

    def __init__(self, width: int, then: object) -> None:
        self.width = _check_width(width)
        self.then: ScanFromStr[T] = resolve_scanner(then)  # type: ignore[assignment]

    @property
    def wants_leading_junk_stripped(self) -> bool:  # type: ignore[override]
        """Follow the inner scanner."""
        return getattr(self.then, "wants_leading_junk_stripped", True)

    def __repr__(self) -> str:
        """Return debug representation."""
        return f"{type(self).__name__}({self.width}, {self.then!r})"


class ExactWidth[T](_Bounded[T]):
    """Forces exactly ``width`` characters to be consumed.

    The inner scanner is given exactly ``width`` characters and must
    consume all of them.
    """

    __slots__ = ()

    def scan_from(self, text: str) -> tuple[T, int]:
        if len(text) < self.width:
            raise ScanError.syntax("input not long enough")
        value, consumed = _run_inner(self.then, text[: self.width])
        if consumed != self.width:
            raise ScanError.syntax("value did not consume enough characters")
        return (value, self.width)


class MaxWidth[T](_Bounded[T]):
    """Forces at most ``width`` characters to be consumed, by truncation."""

    __slots__ = ()

    def scan_from(self, text: str) -> tuple[T, int]:
        return _run_inner(self.then, text[: self.width])


class MinWidth[T](_Bounded[T]):
    """Forces at least ``width`` characters to be consumed.

    The inner scanner sees all of the input; only its consumption is
    checked.
    """

    __slots__ = ()

    def scan_from(self, text: str) -> tuple[T, int]:
        if len(text) < self.width:
            raise ScanError.syntax("expected more characters to scan")
        value, consumed = _run_inner(self.then, text)
        if consumed < self.width:
            raise ScanError.syntax("scanned value too short")
        return (value, consumed)


def exact_width(width: int, then: object) -> ExactWidth[object]:
    """Return a scanner that consumes exactly ``width`` characters with ``then``.

    Raises:
        PatternError: If ``width`` is negative

    Example:
        >>> from scanrules.scanner.misc import Word
        >>> exact_width(2, Word).scan_from("abc")
        ('ab', 2)
    """
    return ExactWidth(width, then)


def exact_width_a(tp: object, width: int) -> ExactWidth[object]:
    """Same as ``exact_width(width, scan_a(tp))``."""
    return ExactWidth(width, ScanA(tp))


def max_width(width: int, then: object) -> MaxWidth[object]:
    """Return a scanner that lets ``then`` see at most ``width`` characters.

    Example:
        >>> from scanrules.scanner.misc import Word
        >>> max_width(2, Word).scan_from("a b")
        ('a', 1)
    """
    return MaxWidth(width, then)


def max_width_a(tp: object, width: int) -> MaxWidth[object]:
    """Same as ``max_width(width, scan_a(tp))``."""
    return MaxWidth(width, ScanA(tp))


def min_width(width: int, then: object) -> MinWidth[object]:
    """Return a scanner that requires ``then`` to consume ``width`` or more characters."""
    return MinWidth(width, then)


def min_width_a(tp: object, width: int) -> MinWidth[object]:
    """Same as ``min_width(width, scan_a(tp))``."""
    return MinWidth(width, ScanA(tp))


# ============================================================================
# PATTERN BOUNDING
# ============================================================================


class ScanRegex[T](Scanner[T]):
    """Slices the input with a regular expression, then scans the slice.

    The regex is searched for, not anchored: use ``^`` to pin it to the
    start of the remaining input. The inner scanner sees the group named
    ``scan`` if the pattern defines one, otherwise the first group,
    otherwise the whole match. Whatever the inner scanner consumes, the
    regex scanner consumes up to the end of the match.
    """

    __slots__ = ("pattern", "then")

    def __init__(self, pattern: str | _re.Pattern[str], then: object) -> None:
        self.pattern: _re.Pattern[str] = _re.compile(pattern)
        self.then: ScanFromStr[T] = resolve_scanner(then)  # type: ignore[assignment]

    def scan_from(self, text: str) -> tuple[T, int]:
        m = self.pattern.search(text)
        if m is None:
            raise ScanError.syntax("no match for regular expression")

        group: int | str = 0
        if SCAN_GROUP_NAME in self.pattern.groupindex:
            group = SCAN_GROUP_NAME
        elif self.pattern.groups >= 1 and m.group(1) is not None:
            group = 1
        start, end = m.span(group)
        if start < 0:
            # Named group did not participate in the match
            start, end = m.span(0)

        value, _ = _run_inner(self.then, text[start:end], start)
        return (value, m.end())

    def __repr__(self) -> str:
        """Return debug representation."""
        return f"ScanRegex({self.pattern.pattern!r}, {self.then!r})"


def re(pattern: str | _re.Pattern[str], then: object) -> ScanRegex[object]:  # noqa: A001
    """Return a scanner that feeds ``then`` the text a regex matched.

    Raises:
        re.error: If ``pattern`` does not compile

    Example:
        >>> from scanrules.scanner.misc import Hex
        >>> re(r"0x(?P<scan>[0-9a-f]+)", Hex).scan_from("at 0x1f: ok")
        (31, 7)
    """
    return ScanRegex(pattern, then)


def re_a(tp: object, pattern: str | _re.Pattern[str]) -> ScanRegex[object]:
    """Same as ``re(pattern, scan_a(tp))``."""
    return ScanRegex(pattern, ScanA(tp))


def re_str(pattern: str | _re.Pattern[str]) -> ScanRegex[str]:
    """Return a scanner yielding the matched text itself.

    Example:
        >>> re_str("[a-z][0-9]").scan_from(" a0c")
        ('a0', 3)
    """
    return ScanRegex(pattern, Everything)


class Until[T](Scanner[T]):
    """Offers the inner scanner only the text before ``literal``.

    The literal itself is left in the input. If the literal does not
    occur, the inner scanner sees everything.
    """

    __slots__ = ("literal", "then")

    def __init__(self, literal: str, then: object) -> None:
        self.literal = literal
        self.then: ScanFromStr[T] = resolve_scanner(then)  # type: ignore[assignment]

    @property
    def wants_leading_junk_stripped(self) -> bool:  # type: ignore[override]
        """Follow the inner scanner."""
        return getattr(self.then, "wants_leading_junk_stripped", True)

    def scan_from(self, text: str) -> tuple[T, int]:
        stop = text.find(self.literal) if self.literal else -1
        return _run_inner(self.then, text if stop < 0 else text[:stop])

    def __repr__(self) -> str:
        """Return debug representation."""
        return f"Until({self.literal!r}, {self.then!r})"


def until(literal: str, then: object) -> Until[object]:
    """Return a scanner that lets ``then`` see the text up to ``literal``.

    Example:
        >>> from scanrules.scanner.misc import Everything
        >>> until(";", Everything).scan_from("a b; c")
        ('a b', 3)
    """
    return Until(literal, then)
