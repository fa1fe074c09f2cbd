"""Diagnostic codes and data structures.

Defines error codes and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorCategory",
]


class ErrorCategory(StrEnum):
    """Error categorization for diagnostics.

    Categories:
        SCAN: Recoverable scan failure (input did not match a rule)
        PATTERN: Rule or scanner misconfiguration (programming error)
        LIMIT: A resource limit was exceeded (nesting depth, input size)
    """

    SCAN = "scan"
    PATTERN = "pattern"
    LIMIT = "limit"


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Scan errors (input rejected by the rules)
        2000-2999: Pattern errors (rules built incorrectly)
        3000-3999: Limit errors (resource bounds exceeded)
    """

    # Scan errors (1000-1999)
    LITERAL_MISMATCH = 1001
    SYNTAX = 1002
    SYNTAX_NO_MESSAGE = 1003
    EXPECTED_END = 1004
    IO = 1005
    OTHER = 1006

    # Pattern errors (2000-2999)
    REPEAT_BOUNDS_INVALID = 2001
    LITERAL_NO_TOKENS = 2002
    NO_RULES = 2003
    TAIL_NOT_LAST = 2004
    NOT_A_SCANNER = 2005
    WIDTH_INVALID = 2006
    LOCALE_UNKNOWN = 2007
    CAPTURE_DUPLICATE = 2008

    # Limit errors (3000-3999)
    MAX_DEPTH_EXCEEDED = 3001
    INPUT_TOO_LARGE = 3002

    @property
    def category(self) -> ErrorCategory:
        """Category derived from the code's numeric range."""
        if self.value < 2000:
            return ErrorCategory.SCAN
        if self.value < 3000:
            return ErrorCategory.PATTERN
        return ErrorCategory.LIMIT


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Carries everything needed to
    render a scan failure for a human or a tool.

    Note:
        Offsets are character offsets (Unicode code points) into the
        top-level input, not UTF-8 byte offsets.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        offset: Character offset into the scanned input (None for
            pattern and limit errors)
        hint: Suggestion for fixing the error
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    offset: int | None = None
    hint: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[LITERAL_MISMATCH]: did not match literal
              --> offset 7
              = help: Check the literal text against the input

        Control characters in the message are escaped so that scanned
        input echoed into a message cannot forge extra log lines.

        Returns:
            Formatted error message
        """
        message = _escape_control(self.message)
        lines = [f"{self.severity}[{self.code.name}]: {message}"]
        if self.offset is not None:
            lines.append(f"  --> offset {self.offset}")
        if self.hint:
            lines.append(f"  = help: {_escape_control(self.hint)}")
        return "\n".join(lines)


def _escape_control(text: str) -> str:
    """Escape non-printable characters so the output stays on one line."""
    if text.isprintable():
        return text
    return "".join(ch if ch.isprintable() else repr(ch)[1:-1] for ch in text)
