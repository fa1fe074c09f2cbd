"""Convenience entry points.

    scan(source, *rules)        first matching rule's value, or ScanError
    try_scan(source, *rules)    (value, None) or (None, error)
    let_scan(source, *terms)    one rule, returns its Captures
    readln(*rules)              read a line from a stream, then scan it
    try_readln(*rules)          non-raising readln

All of them build a Grammar and delegate to it. Build the Grammar once
and reuse it when scanning many inputs with the same rules.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from scanrules.diagnostics import ScanError
from scanrules.rules.engine import Captures, Grammar, Rule

if TYPE_CHECKING:
    from typing import TextIO

    from scanrules.syntax.cursor import Cursor
    from scanrules.syntax.policies import ScanPolicy

__all__ = ["let_scan", "readln", "scan", "try_readln", "try_scan"]

logger = logging.getLogger(__name__)


def scan(source: str | Cursor, *rules: object, policy: ScanPolicy | None = None) -> object:
    """Scan ``source`` against ``rules`` in order.

    Args:
        source: Input text or cursor
        *rules: Rules (or shorthand tuples) in priority order
        policy: Literal and whitespace policy

    Returns:
        The value of the first rule that matches the whole input

    Raises:
        ScanError: The furthest-along error when no rule matches
        PatternError: If the rules are malformed

    Example:
        >>> from scanrules.rules.terms import capture
        >>> scan("move 3 north",
        ...      Rule("move", capture(int, "n"), "north", action=lambda n: (0, n)),
        ...      Rule("move", capture(int, "n"), "east", action=lambda n: (n, 0)))
        (0, 3)
    """
    return Grammar(*rules, policy=policy).scan(source)


def try_scan(
    source: str | Cursor,
    *rules: object,
    policy: ScanPolicy | None = None,
) -> tuple[object, ScanError | None]:
    """Like ``scan``, but returns ``(value, None)`` or ``(None, error)``.

    Only ScanError is returned; PatternError still raises.
    """
    try:
        return (scan(source, *rules, policy=policy), None)
    except ScanError as err:
        return (None, err)


def let_scan(source: str | Cursor, *terms: object, policy: ScanPolicy | None = None) -> Captures:
    """Scan ``source`` with a single rule and return what it captured.

    Example:
        >>> from scanrules.rules.terms import capture
        >>> caps = let_scan("width: 80", "width", ":", capture(int, "width"))
        >>> caps["width"]
        80
    """
    result = Grammar(Rule(*terms), policy=policy).scan(source)
    assert isinstance(result, Captures)  # noqa: S101 - Rule has no action
    return result


def _read_line(stream: TextIO) -> str:
    try:
        line = stream.readline()
    except (OSError, UnicodeDecodeError) as err:
        raise ScanError.io(err) from err
    if not line:
        logger.debug("readln: stream exhausted")
        eof = EOFError("end of input stream")
        raise ScanError.io(eof) from eof
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


def readln(
    *rules: object,
    stream: TextIO | None = None,
    policy: ScanPolicy | None = None,
) -> object:
    """Read one line from ``stream`` (default: ``sys.stdin``) and scan it.

    The line terminator is removed before scanning.

    Raises:
        ScanError: IO if reading fails or the stream is exhausted, otherwise
            the scan failure
    """
    grammar = Grammar(*rules, policy=policy)
    line = _read_line(stream if stream is not None else sys.stdin)
    return grammar.scan(line)


def try_readln(
    *rules: object,
    stream: TextIO | None = None,
    policy: ScanPolicy | None = None,
) -> tuple[object, ScanError | None]:
    """Like ``readln``, but returns ``(value, None)`` or ``(None, error)``."""
    try:
        return (readln(*rules, stream=stream, policy=policy), None)
    except ScanError as err:
        return (None, err)
