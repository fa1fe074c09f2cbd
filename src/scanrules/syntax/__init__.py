"""Cursor, matching policies and the literal matcher.

Everything here is independent of the scanner and rules packages, which
build on it.

Python 3.13+.
"""

from .cursor import Cursor, LineOffsetCache, ScanResult
from .literal import check_literal, match_literal
from .policies import (
    DEFAULT_POLICY,
    ComparePolicy,
    ExactCompare,
    ExactSpace,
    FuzzySpace,
    IgnoreAsciiCase,
    IgnoreCase,
    IgnoreCaseNormalized,
    IgnoreNonLine,
    IgnoreSpace,
    NonSpace,
    Normalized,
    ScanPolicy,
    SpacePolicy,
    WordPolicy,
    Wordish,
)

__all__ = [
    "DEFAULT_POLICY",
    "ComparePolicy",
    "Cursor",
    "ExactCompare",
    "ExactSpace",
    "FuzzySpace",
    "IgnoreAsciiCase",
    "IgnoreCase",
    "IgnoreCaseNormalized",
    "IgnoreNonLine",
    "IgnoreSpace",
    "LineOffsetCache",
    "NonSpace",
    "Normalized",
    "ScanPolicy",
    "ScanResult",
    "SpacePolicy",
    "WordPolicy",
    "Wordish",
    "check_literal",
    "match_literal",
]
