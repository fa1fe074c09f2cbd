"""scanrules exception hierarchy with structured diagnostics.

All exceptions store Diagnostic objects for rich error information.

Two families:
    - ScanError: recoverable. The input did not match. Alternation and
      repetition catch it, compare offsets, and retry or stop.
    - PatternError / DepthLimitExceededError: fatal. The rules themselves
      are wrong or a resource bound was hit. Never caught by the engine.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scanrules.enums import ScanErrorKind

from .codes import Diagnostic
from .templates import ErrorTemplate

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scanrules.syntax.cursor import Cursor

__all__ = [
    "DepthLimitExceededError",
    "PatternError",
    "ScanError",
    "ScanRulesError",
    "furthest_along",
]


class ScanRulesError(Exception):
    """Base exception for all scanrules errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize ScanRulesError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class PatternError(ScanRulesError, ValueError):
    """A rule, term or scanner was built incorrectly.

    Raised eagerly at construction time (or on first use for checks that
    need the active policy). Never surfaces as a ScanError, so alternation
    and repetition never mistake it for a failed match.

    Examples:
    - repeat(..., min=3, max=2)
    - literal("   ") under a policy that skips whitespace
    - Grammar() with no rules
    """


class DepthLimitExceededError(ScanRulesError):
    """Raised when grammar nesting exceeds the configured depth.

    This error indicates either:
    - Adversarial input designed to cause stack overflow
    - A grammar that re-enters itself without consuming input
    """


class ScanError(ScanRulesError):
    """Input did not match the rules being scanned.

    Offsets are character offsets relative to the top-level input handed
    to the scan entry point. Scanners raise errors relative to the text
    they were given; the cursor rebases them as they propagate outward.

    Attributes:
        kind: Why the scan failed
        offset: Character offset at which the failure was recorded
        description: Static description for SYNTAX errors (None means
            "unknown syntax error")
        cause: Wrapped exception for IO and OTHER errors
        cursor: The un-advanced cursor the failing operation started from,
            when the failure came out of a cursor operation

    Example:
        >>> err = ScanError.literal_mismatch(3)
        >>> str(err)
        'scan error: did not match literal, at offset: 3'
        >>> err.add_offset(4).offset
        7
    """

    def __init__(
        self,
        kind: ScanErrorKind,
        offset: int = 0,
        *,
        description: str | None = None,
        cause: BaseException | None = None,
        cursor: Cursor | None = None,
    ) -> None:
        """Initialize ScanError.

        Args:
            kind: Failure kind
            offset: Character offset of the failure
            description: Description for SYNTAX errors
            cause: Wrapped exception for IO and OTHER errors
            cursor: Un-advanced cursor to continue from
        """
        super().__init__(_diagnostic_for(kind, offset, description, cause))
        self.kind = kind
        self.offset = offset
        self.description = description
        self.cause = cause
        self.cursor = cursor
        if cause is not None:
            self.__cause__ = cause

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def literal_mismatch(cls, offset: int) -> ScanError:
        """Shorthand for a LITERAL_MISMATCH error."""
        return cls(ScanErrorKind.LITERAL_MISMATCH, offset)

    @classmethod
    def syntax(cls, description: str | None = None, offset: int = 0) -> ScanError:
        """Shorthand for a SYNTAX error with an optional description."""
        return cls(ScanErrorKind.SYNTAX, offset, description=description)

    @classmethod
    def expected_end(cls, offset: int) -> ScanError:
        """Shorthand for an EXPECTED_END error."""
        return cls(ScanErrorKind.EXPECTED_END, offset)

    @classmethod
    def io(cls, error: BaseException) -> ScanError:
        """Shorthand for an IO error wrapping a failed or exhausted read."""
        return cls(ScanErrorKind.IO, 0, cause=error)

    @classmethod
    def other(cls, error: BaseException, offset: int = 0) -> ScanError:
        """Shorthand for an OTHER error wrapping an arbitrary exception."""
        return cls(ScanErrorKind.OTHER, offset, cause=error)

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def add_offset(self, amount: int) -> ScanError:
        """Return a copy of this error with its offset moved forward.

        Used to rebase an error raised against a sub-slice onto the
        enclosing text.
        """
        return ScanError(
            self.kind,
            self.offset + amount,
            description=self.description,
            cause=self.cause,
            cursor=self.cursor,
        )

    def with_cursor(self, cursor: Cursor) -> ScanError:
        """Return a copy of this error carrying the given un-advanced cursor."""
        return ScanError(
            self.kind,
            self.offset,
            description=self.description,
            cause=self.cause,
            cursor=cursor,
        )

    def furthest_along(self, other: ScanError) -> ScanError:
        """Return whichever error occurred furthest into the input.

        Ties keep ``self``, so folding errors in rule order reports the
        earliest rule among those that got equally far.
        """
        if self.offset >= other.offset:
            return self
        return other

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def message(self) -> str:
        """Kind-specific message without the offset."""
        if self.diagnostic is None:  # pragma: no cover - always set by __init__
            return str(self.kind)
        return self.diagnostic.message

    def __str__(self) -> str:
        """Return 'scan error: <message>, at offset: <n>'."""
        return f"scan error: {self.message}, at offset: {self.offset}"

    def __repr__(self) -> str:
        """Return debug representation."""
        return f"ScanError(kind={self.kind!s}, offset={self.offset}, message={self.message!r})"

    def format_error(self, source: str | None = None) -> str:
        """Format error with line:column when the source is known.

        Args:
            source: The top-level input the offset refers to

        Returns:
            ``"line:col: message"`` with source, ``str(self)`` without

        Example:
            >>> ScanError.expected_end(7).format_error("ab\\ncdefgh")
            '2:5: expected end of input'
        """
        if source is None:
            return str(self)
        from scanrules.syntax.cursor import LineOffsetCache  # noqa: PLC0415 - circular

        line, col = LineOffsetCache(source).get_line_col(self.offset)
        return f"{line}:{col}: {self.message}"

    def format_with_context(self, source: str, context_lines: int = 2) -> str:
        """Format error with source context and pointer.

        Shows the problematic line and a caret pointing to the error location.

        Args:
            source: The top-level input the offset refers to
            context_lines: Number of lines to show before/after error

        Returns:
            Multi-line formatted error with context

        Example:
            >>> err = ScanError.literal_mismatch(10)
            >>> print(err.format_with_context("name: Tom\\nage: x"))
            2:1: did not match literal
            <BLANKLINE>
               1 | name: Tom
               2 | age: x
                 | ^
        """
        from scanrules.syntax.cursor import LineOffsetCache  # noqa: PLC0415 - circular

        line, col = LineOffsetCache(source).get_line_col(self.offset)
        lines = source.split("\n")

        result_lines = [self.format_error(source), ""]

        start_line = max(1, line - context_lines)
        end_line = min(len(lines), line + context_lines)

        for i in range(start_line, end_line + 1):
            line_num_str = f"{i:4} | "
            result_lines.append(line_num_str + lines[i - 1])

            if i == line:
                pointer = " " * (len(line_num_str) - 2) + "| " + " " * (col - 1) + "^"
                result_lines.append(pointer)

        return "\n".join(result_lines)


def furthest_along(errors: Iterable[ScanError]) -> ScanError:
    """Fold errors in order, keeping the one furthest into the input.

    Args:
        errors: Non-empty iterable of errors, in rule declaration order

    Returns:
        The furthest error; the earliest one among ties

    Raises:
        ValueError: If errors is empty
    """
    best: ScanError | None = None
    for error in errors:
        best = error if best is None else best.furthest_along(error)
    if best is None:
        msg = "furthest_along() requires at least one error"
        raise ValueError(msg)
    return best


def _diagnostic_for(
    kind: ScanErrorKind,
    offset: int,
    description: str | None,
    cause: BaseException | None,
) -> Diagnostic:
    match kind:
        case ScanErrorKind.LITERAL_MISMATCH:
            return ErrorTemplate.literal_mismatch(offset)
        case ScanErrorKind.SYNTAX:
            return ErrorTemplate.syntax(offset, description)
        case ScanErrorKind.EXPECTED_END:
            return ErrorTemplate.expected_end(offset)
        case ScanErrorKind.IO:
            return ErrorTemplate.io(cause if cause is not None else OSError("unknown"))
        case _:
            return ErrorTemplate.other(offset, cause if cause is not None else ValueError())
