"""Nesting depth limiting for recursive grammar evaluation.

A grammar can be used as a scanner inside another grammar, and the
collection scanners are grammars that recurse into their element scanner.
Deeply nested input ("[[[[...]]]]") therefore turns into deep Python
recursion. NestingGuard bounds that recursion.

Thread Safety:
    Depth is tracked in a ContextVar, so every thread and every asyncio
    task has independent state. No locks are needed.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar, Token

from scanrules.constants import MAX_DEPTH
from scanrules.diagnostics import DepthLimitExceededError, ErrorTemplate

__all__ = ["NestingGuard", "current_depth", "depth_clamp"]

logger = logging.getLogger(__name__)

# Grammar nesting depth for the current context. A scanner object has no
# handle on the grammar that invoked it, so the depth cannot be threaded
# through scan_from() explicitly.
_grammar_depth: ContextVar[int] = ContextVar("scanrules_grammar_depth", default=0)

# Approximate interpreter frames consumed per grammar nesting level.
_FRAMES_PER_LEVEL = 16


class NestingGuard:
    """Context manager tracking grammar nesting depth for the current context.

    Usage:
        with NestingGuard(max_depth=100):
            # Nested Grammar.scan_from() calls are tracked
            value = evaluate(rules, cursor)

    Validates the depth BEFORE incrementing: __exit__ is not called when
    __enter__ raises, so incrementing first would leave the counter
    permanently elevated.
    """

    __slots__ = ("_max_depth", "_token")

    def __init__(self, max_depth: int = MAX_DEPTH) -> None:
        """Initialize guard with maximum depth limit."""
        self._max_depth = depth_clamp(max_depth)
        self._token: Token[int] | None = None

    @property
    def max_depth(self) -> int:
        """Effective (clamped) depth limit."""
        return self._max_depth

    def __enter__(self) -> NestingGuard:
        """Enter guarded section, increment context depth."""
        depth = _grammar_depth.get()
        if depth >= self._max_depth:
            raise DepthLimitExceededError(ErrorTemplate.max_depth_exceeded(self._max_depth))
        self._token = _grammar_depth.set(depth + 1)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit guarded section, restore previous depth."""
        if self._token is not None:
            _grammar_depth.reset(self._token)
            self._token = None


def current_depth() -> int:
    """Return the grammar nesting depth of the current context."""
    return _grammar_depth.get()


def depth_clamp(requested_depth: int, reserve_frames: int = 50) -> int:
    """Clamp requested depth against Python recursion limit.

    Each nesting level costs several interpreter frames (grammar, rule,
    term, cursor, scanner), so the usable depth is a fraction of the
    recursion limit. Logs a warning if clamping occurs.

    Args:
        requested_depth: Desired maximum depth
        reserve_frames: Stack frames to reserve for call overhead (default: 50)

    Returns:
        Safe depth value, clamped if necessary

    Example:
        >>> import sys
        >>> sys.setrecursionlimit(400)
        >>> depth_clamp(20)  # OK, within limit
        20
        >>> depth_clamp(500)  # Exceeds limit, clamped to (400 - 50) // 16
        21
    """
    max_safe_depth = max(1, (sys.getrecursionlimit() - reserve_frames) // _FRAMES_PER_LEVEL)
    if requested_depth > max_safe_depth:
        logger.warning(
            "Requested nesting depth %d exceeds what the Python recursion limit (%d) "
            "allows. Clamping to %d to prevent RecursionError. "
            "Consider increasing sys.setrecursionlimit() if needed.",
            requested_depth,
            sys.getrecursionlimit(),
            max_safe_depth,
        )
        return max_safe_depth
    return requested_depth
