"""Immutable cursor over the input being scanned.

Implements the immutable cursor pattern for backtracking scanners.
Python 3.13+. Zero external dependencies.

Design Philosophy:
    - Cursor is immutable (frozen dataclass)
    - Every advance returns a NEW cursor; backtracking is just reusing an
      older cursor value, never undoing mutations
    - Failures raise ScanError carrying the un-advanced cursor, so a caller
      retrying an alternative always has a known-good position
    - Offsets are character offsets into the top-level input string
    - Line:column computed on-demand (only for error reporting)

Pattern Reference:
    - Rust nom parser combinator library
    - Haskell Parsec
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from scanrules.diagnostics import PatternError, ScanError
from scanrules.syntax.literal import match_literal
from scanrules.syntax.policies import DEFAULT_POLICY, ScanPolicy

if TYPE_CHECKING:
    from collections.abc import Iterator

    from scanrules.scanner.protocol import ScanFromStr

__all__ = ["Cursor", "LineOffsetCache", "ScanResult"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable scan position over a source string.

    Key Design Decisions:
        1. Frozen dataclass - Immutability enforced by Python
        2. Slots - Memory efficiency (cursors are created per term)
        3. Simple position - Just an integer offset into ``source``
        4. Policy travels with the cursor - Every term sees the same rules
           for whitespace and literal comparison

    Attributes:
        source: The complete top-level input
        pos: Characters already consumed
        policy: Literal matching and whitespace strategies

    Example:
        >>> cursor = Cursor("age: 42")
        >>> after = cursor.try_match_literal("age:")
        >>> after.offset, after.as_str()
        (4, ' 42')
        >>> cursor.offset  # Original unchanged (immutability)
        0
    """

    source: str
    pos: int = 0
    policy: ScanPolicy = DEFAULT_POLICY

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def offset(self) -> int:
        """Number of characters consumed from the top-level input."""
        return self.pos

    @property
    def is_eof(self) -> bool:
        """Check if the whole input has been consumed."""
        return self.pos >= len(self.source)

    def as_str(self) -> str:
        """Return the remaining (unconsumed) input."""
        return self.source[self.pos :]

    def slice_ahead(self, n: int) -> str:
        """Get next n characters without advancing cursor.

        Example:
            >>> Cursor("hello").slice_ahead(3)
            'hel'
        """
        return self.source[self.pos : self.pos + n]

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def advance(self, count: int = 1) -> Cursor:
        """Return new cursor advanced by count characters.

        Example:
            >>> cursor = Cursor("hello")
            >>> cursor.advance(2).pos
            2
            >>> cursor.pos
            0
        """
        new_pos = min(self.pos + count, len(self.source))
        return Cursor(self.source, new_pos, self.policy)

    def with_policy(self, policy: ScanPolicy) -> Cursor:
        """Return a cursor at the same position using a different policy."""
        return replace(self, policy=policy)

    def skip_space(self) -> Cursor:
        """Return a cursor past the whitespace the policy skips."""
        return self.advance(self.policy.space.skip_leading(self.source, self.pos))

    # ------------------------------------------------------------------
    # Scanning operations
    # ------------------------------------------------------------------

    def try_end(self) -> None:
        """Succeed only if nothing but skippable whitespace remains.

        Raises:
            ScanError: EXPECTED_END at the first non-skipped character,
                carrying this (un-advanced) cursor

        Example:
            >>> Cursor("x  ", 1).try_end()
            >>> Cursor("x  y", 1).try_end()
            Traceback (most recent call last):
            ...
            scanrules.diagnostics.errors.ScanError: scan error: expected end of input, at offset: 3
        """
        skipped = self.policy.space.skip_leading(self.source, self.pos)
        end = self.pos + skipped
        if end < len(self.source):
            raise ScanError.expected_end(end).with_cursor(self)

    def try_scan[T](self, scanner: ScanFromStr[T]) -> ScanResult[T]:
        """Run a scanner on the remaining input.

        Leading whitespace (per policy) is skipped first unless the scanner
        reports ``wants_leading_junk_stripped = False``.

        Args:
            scanner: Object with ``scan_from(text) -> (value, consumed)``

        Returns:
            The scanned value and a cursor advanced past skipped whitespace
            plus consumed characters

        Raises:
            ScanError: Rebased onto the top-level input (offset includes the
                skipped whitespace), carrying this (un-advanced) cursor
        """
        if getattr(scanner, "wants_leading_junk_stripped", True):
            skipped = self.policy.space.skip_leading(self.source, self.pos)
        else:
            skipped = 0
        return self._run(scanner, skipped)

    def try_scan_raw[T](self, scanner: ScanFromStr[T]) -> ScanResult[T]:
        """Run a scanner on the remaining input without skipping anything.

        Raises:
            ScanError: Rebased onto the top-level input, carrying this cursor
        """
        return self._run(scanner, 0)

    def try_match_literal(self, literal: str) -> Cursor:
        """Match a literal under this cursor's policy.

        The cursor may advance by more or fewer characters than the literal
        has, depending on how whitespace was reconciled.

        Raises:
            ScanError: LITERAL_MISMATCH at the first disagreeing input token,
                carrying this (un-advanced) cursor
            PatternError: If the literal has no comparable tokens
        """
        try:
            consumed = match_literal(self.source, literal, self.policy, self.pos)
        except ScanError as err:
            raise err.add_offset(self.pos).with_cursor(self) from None
        return self.advance(consumed)

    def _run[T](self, scanner: ScanFromStr[T], skipped: int) -> ScanResult[T]:
        start = self.pos + skipped
        text = self.source[start:]
        try:
            value, consumed = scanner.scan_from(text)
        except ScanError as err:
            relocated = err.add_offset(start).with_cursor(self)
            raise relocated from relocated.cause
        except PatternError:
            raise
        except (ValueError, ArithmeticError) as err:
            raise ScanError.other(err, start).with_cursor(self) from err
        return ScanResult(value, self.advance(skipped + consumed))

    # ------------------------------------------------------------------
    # Error reporting
    # ------------------------------------------------------------------

    def compute_line_col(self) -> tuple[int, int]:
        """Compute line and column for current position.

        Returns:
            (line, column) tuple (1-indexed, like text editors)

        Performance:
            O(n) where n = current position.
            Only call for error reporting, not during scanning.

        Example:
            >>> Cursor("line1\\nline2", 8).compute_line_col()
            (2, 3)
        """
        line = self.source.count("\n", 0, self.pos) + 1
        last_newline = self.source.rfind("\n", 0, self.pos)
        col = self.pos - last_newline if last_newline >= 0 else self.pos + 1
        return (line, col)

    def __repr__(self) -> str:
        """Return debug representation showing the remaining input."""
        ahead = self.slice_ahead(20)
        more = "..." if self.pos + 20 < len(self.source) else ""
        return f"Cursor(offset={self.pos}, ahead={ahead!r}{more})"


class LineOffsetCache:
    """Cached line offset computation for efficient position lookups.

    Precomputes line start offsets in O(n) single pass, then provides
    O(log n) lookups using binary search. Use this when several offsets
    into the same input need line:column positions.

    Example:
        >>> cache = LineOffsetCache("abc\\ndef\\nghi")
        >>> cache.get_line_col(0)
        (1, 1)
        >>> cache.get_line_col(4)  # 'd' in "def"
        (2, 1)

    Thread Safety:
        Thread-safe. Internal state is only set during __init__.
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: str) -> None:
        """Build line offset cache from source."""
        offsets = [0]
        for i, char in enumerate(source):
            if char == "\n":
                offsets.append(i + 1)
        self._offsets: tuple[int, ...] = tuple(offsets)
        self._source_len = len(source)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """Get line and column for position using binary search.

        Args:
            pos: Character position in source (0-indexed, clamped)

        Returns:
            (line, column) tuple (1-indexed)
        """
        pos = min(max(pos, 0), self._source_len)
        index = bisect_right(self._offsets, pos) - 1
        return (index + 1, pos - self._offsets[index] + 1)


@dataclass(frozen=True, slots=True)
class ScanResult[T]:
    """Scanned value paired with the cursor positioned after it.

    Type Parameters:
        T: The type of the scanned value

    Example:
        >>> from scanrules.scanner.misc import Word
        >>> result = Cursor("hello world").try_scan(Word)
        >>> result.value
        'hello'
        >>> result.cursor.offset
        5
    """

    value: T
    cursor: Cursor

    def __iter__(self) -> Iterator[T | Cursor]:
        """Unpack as ``value, cursor``."""
        return iter((self.value, self.cursor))
