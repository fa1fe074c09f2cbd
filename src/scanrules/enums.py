"""Enumerations for scanrules type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class ScanErrorKind(StrEnum):
    """Reason a scan failed.

    StrEnum provides automatic string conversion: str(ScanErrorKind.SYNTAX) == "syntax"
    """

    LITERAL_MISMATCH = "literal_mismatch"
    """Input did not match a literal term."""

    SYNTAX = "syntax"
    """A scanner rejected its input. May carry a static description."""

    EXPECTED_END = "expected_end"
    """Trailing input remained where none was expected."""

    IO = "io"
    """Reading the input failed."""

    OTHER = "other"
    """An external error (conversion failure, user scanner error) was wrapped."""


class Repeats(StrEnum):
    """Why a repetition stopped looping.

    Reported in debug logging when a repetition ends.
    """

    MAX_REACHED = "max_reached"
    """The upper bound was reached."""

    SEPARATOR_FAILED = "separator_failed"
    """The separator did not match; repetition ends after the last element."""

    ELEMENT_FAILED = "element_failed"
    """The element did not match."""


__all__ = [
    "Repeats",
    "ScanErrorKind",
]
