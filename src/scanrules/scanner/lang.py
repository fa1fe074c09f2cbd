"""Scanners for Python's built-in value types.

Each scanner reads the representation ``str()`` produces for its type, so
scanning a formatted value gives back an equal value. These are also the
default scanners registered for ``int``, ``float``, ``bool``, ``complex``, ``str``,
``Decimal`` and ``Fraction``.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from decimal import Decimal
from fractions import Fraction

from scanrules.diagnostics import ScanError
from scanrules.scanner.misc import Word
from scanrules.scanner.protocol import StaticScanner, convert, match_prefix, register_scanner

__all__ = [
    "Bool",
    "Char",
    "Complex",
    "DecimalScanner",
    "Float",
    "FractionScanner",
    "Int",
    "Str",
]

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf(?:inity)?\b|nan\b|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?)",
    re.IGNORECASE,
)
_DECIMAL_RE = re.compile(
    r"[+-]?(?:inf(?:inity)?\b|s?nan\d*\b|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?)",
    re.IGNORECASE,
)
_REAL = r"(?:(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?|inf(?:inity)?|nan)"
_COMPLEX_BODY = rf"[+-]?{_REAL}(?:[+-]{_REAL}j|j)?"
_COMPLEX_RE = re.compile(rf"\({_COMPLEX_BODY}\)|{_COMPLEX_BODY}", re.IGNORECASE)
_FRACTION_RE = re.compile(r"[+-]?\d+(?:/\d+)?")
_BOOL_RE = re.compile(r"(?:True|False|true|false)\b")


class Int(StaticScanner[int]):
    """Scans an optionally signed decimal integer.

    Underscore digit separators are not accepted, although ``int()`` would.

    Example:
        >>> Int.scan_from("-42 apples")
        (-42, 3)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[int, int]:
        digits, consumed = match_prefix(_INT_RE, text, "expected an integer")
        return (convert(int, digits), consumed)


class Float(StaticScanner[float]):
    """Scans a float in decimal, exponent, ``inf`` or ``nan`` form.

    Example:
        >>> Float.scan_from("1e+23 rest")
        (1e+23, 5)
        >>> Float.scan_from("-inf")
        (-inf, 4)
        >>> Float.scan_from("1.0e")  # incomplete exponent is not consumed
        (1.0, 3)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[float, int]:
        number, consumed = match_prefix(_FLOAT_RE, text, "expected a floating point number")
        return (convert(float, number), consumed)


class Bool(StaticScanner[bool]):
    """Scans ``True``/``False`` (Python's display form) or ``true``/``false``."""

    @classmethod
    def scan_from(cls, text: str) -> tuple[bool, int]:
        word, consumed = match_prefix(_BOOL_RE, text, "expected `true` or `false`")
        return (word in ("True", "true"), consumed)


class Char(StaticScanner[str]):
    """Scans exactly one code point."""

    @classmethod
    def scan_from(cls, text: str) -> tuple[str, int]:
        if not text:
            raise ScanError.syntax("expected a character")
        return (text[0], 1)


class Complex(StaticScanner[complex]):
    """Scans a complex number as ``str()`` writes it: ``(1+2j)``, ``2j`` or ``3``.

    Example:
        >>> Complex.scan_from("(1-2.5j) next")
        ((1-2.5j), 8)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[complex, int]:
        number, consumed = match_prefix(_COMPLEX_RE, text, "expected a complex number")
        return (convert(complex, number), consumed)


class DecimalScanner(StaticScanner[Decimal]):
    """Scans a ``decimal.Decimal``, including ``Infinity``, ``NaN`` and ``sNaN``.

    Example:
        >>> DecimalScanner.scan_from("19.99 EUR")
        (Decimal('19.99'), 5)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[Decimal, int]:
        number, consumed = match_prefix(_DECIMAL_RE, text, "expected a decimal number")
        return (convert(Decimal, number), consumed)


class FractionScanner(StaticScanner[Fraction]):
    """Scans a ``fractions.Fraction`` written as ``n`` or ``n/d``.

    A zero denominator is a conversion failure (OTHER), not a syntax error.
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[Fraction, int]:
        number, consumed = match_prefix(_FRACTION_RE, text, "expected a fraction")
        return (convert(Fraction, number), consumed)


# The default string scanner reads one word.
Str = Word

register_scanner(int, Int)
register_scanner(float, Float)
register_scanner(bool, Bool)
register_scanner(complex, Complex)
register_scanner(str, Str)
register_scanner(Decimal, DecimalScanner)
register_scanner(Fraction, FractionScanner)
