"""Scanner protocol and type registry.

A scanner consumes a prefix of some text and produces a value:

    scan_from(text) -> (value, consumed)

``consumed`` must never exceed ``len(text)``. Failures raise ScanError
with an offset relative to ``text``; the cursor rebases it onto the
top-level input.

Scanners come in three shapes:

    StaticScanner subclasses:  the class itself is the scanner
                               (``Word``, ``Hex``, ``Line``, ...)
    Scanner instances:         runtime-parameterized scanners
                               (``ListOf(int)``, ``exact_width(2, Hex)``)
    ScanSelfFromStr subclasses: user types that scan themselves

Abstract scanners produce a value of a different type than themselves:
``Hex`` produces an ``int``. Plain Python types (``int``, ``float``, ...)
are mapped to their default scanner through the registry, so a capture
can simply name the type it wants.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar, Protocol, Self, runtime_checkable

from scanrules.diagnostics import ErrorTemplate, PatternError, ScanError

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "ScanFromStr",
    "ScanSelfFromStr",
    "Scanner",
    "StaticScanner",
    "convert",
    "is_scanner",
    "match_prefix",
    "register_scanner",
    "registered_types",
    "resolve_scanner",
]


# pylint: disable=unnecessary-ellipsis
@runtime_checkable
class ScanFromStr[T](Protocol):
    """Anything with a ``scan_from`` method.

    Implementations may also define ``wants_leading_junk_stripped``; when
    absent it is treated as True.
    """

    def scan_from(self, text: str) -> tuple[T, int]:
        """Scan a prefix of ``text`` and return ``(value, consumed)``."""
        ...
# pylint: enable=unnecessary-ellipsis


class Scanner[T]:
    """Base class for runtime-parameterized scanners.

    Subclasses implement ``scan_from``. Whitespace scanners set
    ``wants_leading_junk_stripped = False``.
    """

    __slots__ = ()

    wants_leading_junk_stripped: ClassVar[bool] = True

    def scan_from(self, text: str) -> tuple[T, int]:
        """Scan a prefix of ``text`` and return ``(value, consumed)``."""
        raise NotImplementedError

    def __repr__(self) -> str:
        """Return debug representation."""
        return f"{type(self).__name__}()"


class StaticScanner[T]:
    """Base class for scanners used as classes, never instantiated.

    Example:
        >>> class Digits(StaticScanner[str]):
        ...     @classmethod
        ...     def scan_from(cls, text: str) -> tuple[str, int]:
        ...         return match_prefix(r"\\d+", text, "expected digits")
        >>> Digits.scan_from("123abc")
        ('123', 3)
    """

    wants_leading_junk_stripped: ClassVar[bool] = True

    def __init__(self) -> None:
        msg = f"{type(self).__name__} is used as a class and cannot be instantiated"
        raise TypeError(msg)

    @classmethod
    def scan_from(cls, text: str) -> tuple[T, int]:
        """Scan a prefix of ``text`` and return ``(value, consumed)``."""
        raise NotImplementedError


class ScanSelfFromStr:
    """Mixin for user types that know how to scan themselves.

    Subclasses implement ``scan_self_from`` and can then be named directly
    in a capture. The default representation a type scans should be the
    one its ``str()`` produces, so values round-trip.

    Example:
        >>> class Version(ScanSelfFromStr):
        ...     def __init__(self, major, minor):
        ...         self.major, self.minor = major, minor
        ...     @classmethod
        ...     def scan_self_from(cls, text):
        ...         matched, consumed = match_prefix(r"\\d+\\.\\d+", text, "expected version")
        ...         major, minor = matched.split(".")
        ...         return cls(int(major), int(minor)), consumed
        >>> version, consumed = Version.scan_from("3.13 rest")
        >>> (version.minor, consumed)
        (13, 4)
    """

    wants_leading_junk_stripped: ClassVar[bool] = True

    @classmethod
    def scan_self_from(cls, text: str) -> tuple[Self, int]:
        """Scan an instance of ``cls`` from a prefix of ``text``."""
        raise NotImplementedError

    @classmethod
    def scan_from(cls, text: str) -> tuple[Self, int]:
        """Protocol entry point; delegates to ``scan_self_from``."""
        return cls.scan_self_from(text)


# ============================================================================
# REGISTRY
# ============================================================================

_REGISTRY: dict[type, ScanFromStr[object]] = {}


def register_scanner(tp: type, scanner: ScanFromStr[object]) -> None:
    """Make ``scanner`` the default scanner for captures of type ``tp``.

    Re-registering a type replaces the previous scanner.

    Args:
        tp: The Python type named in captures
        scanner: A scanner producing values of ``tp``

    Raises:
        PatternError: If ``scanner`` has no ``scan_from``
    """
    if not is_scanner(scanner):
        raise PatternError(ErrorTemplate.not_a_scanner(scanner))
    _REGISTRY[tp] = scanner


def registered_types() -> tuple[type, ...]:
    """Return the types that currently have a default scanner."""
    return tuple(_REGISTRY)


def is_scanner(target: object) -> bool:
    """Check whether ``target`` can be handed to ``Cursor.try_scan``."""
    return callable(getattr(target, "scan_from", None))


def resolve_scanner(target: object) -> ScanFromStr[object]:
    """Turn a capture target into a scanner.

    Resolution order:
        1. The registry, so a registered type wins over its own scan_from
        2. Anything with a ``scan_from`` (scanner classes, instances,
           ScanSelfFromStr subclasses)

    Raises:
        PatternError: If nothing applies
    """
    if isinstance(target, type) and target in _REGISTRY:
        return _REGISTRY[target]
    if is_scanner(target):
        return target  # type: ignore[return-value]
    raise PatternError(ErrorTemplate.not_a_scanner(target))


# ============================================================================
# HELPERS
# ============================================================================


def match_prefix(
    pattern: str | re.Pattern[str],
    text: str,
    description: str,
) -> tuple[str, int]:
    """Match a regular expression at the start of ``text``.

    Returns:
        ``(matched_text, length)``

    Raises:
        ScanError: SYNTAX with ``description`` if the pattern does not match
            or matches the empty string
    """
    m = re.match(pattern, text)
    if m is None or m.end() == 0:
        raise ScanError.syntax(description)
    return (m.group(0), m.end())


def convert[T](convert_fn: Callable[[str], T], text: str, offset: int = 0) -> T:
    """Apply a conversion, wrapping failures as OTHER scan errors.

    Raises:
        ScanError: OTHER with the conversion exception as its cause
    """
    try:
        return convert_fn(text)
    except (ValueError, ArithmeticError) as err:
        raise ScanError.other(err, offset) from err
