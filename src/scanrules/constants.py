"""Shared constants for scanrules.

This module provides centralized configuration constants used across
the syntax, scanner and rules packages. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for nested grammar evaluation
- Input limits: DoS prevention via size constraints
- Scanner defaults: Regex group names and character classes

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    # Input limits
    "MAX_INPUT_SIZE",
    # Scanner defaults
    "SCAN_GROUP_NAME",
    "LINE_BREAK_CHARS",
    "LINE_BREAKS",
    "WORD_EXTRA_CATEGORIES",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================
#
# Grammar evaluation recurses whenever a grammar is used as a scanner inside
# another grammar. The built-in collection scanners (ListOf, DictOf, ...)
# are grammars themselves, so input such as "[[[[[[...]]]]]]" scanned with a
# nested ListOf recurses once per bracket.
#
# Each nesting level costs roughly a dozen interpreter frames (grammar, rule,
# repetition, term, cursor, scanner), so 50 levels stay well inside the
# default recursion limit of 1000.
#
# ============================================================================

# Maximum nesting of grammar evaluations within a single top-level scan.
MAX_DEPTH: int = 50

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Default maximum top-level input size in characters (10 M).
# Scanning is in-memory only; larger inputs are rejected up front.
MAX_INPUT_SIZE: int = 10 * 1024 * 1024

# ============================================================================
# SCANNER DEFAULTS
# ============================================================================

# Named group that regex-bounded scanners hand to their inner scanner.
# Without it, group 1 is used, then the whole match.
SCAN_GROUP_NAME: str = "scan"

# Line break sequences, longest first so "\r\n" wins over "\r".
# Everything str.isspace() accepts that is not listed here is horizontal.
LINE_BREAKS: tuple[str, ...] = (
    "\r\n", "\n", "\r", "\x0b", "\x0c", "\x1c", "\x1d", "\x1e", "\x85", "\u2028", "\u2029",
)

# Single characters that start a line break.
LINE_BREAK_CHARS: frozenset[str] = frozenset(b[0] for b in LINE_BREAKS)

# Unicode general categories that continue a literal word besides
# letters, digits and "_": combining marks and connector punctuation.
WORD_EXTRA_CATEGORIES: frozenset[str] = frozenset({"Mn", "Mc", "Me", "Pc"})
