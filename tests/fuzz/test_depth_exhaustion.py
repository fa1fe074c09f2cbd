"""Boundary tests for grammar nesting limits.

Nested collection scanners recurse through one grammar per level. Up to
MAX_DEPTH levels must scan; one more must raise DepthLimitExceededError
rather than RecursionError, and the depth counter must be back at zero
afterwards, in every thread.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from scanrules.constants import MAX_DEPTH
from scanrules.core.depth_guard import current_depth
from scanrules.diagnostics import DepthLimitExceededError
from scanrules.scanner.std import ListOf

pytestmark = pytest.mark.fuzz


def _nested(depth: int) -> ListOf[object]:
    scanner: object = int
    for _ in range(depth):
        scanner = ListOf(scanner)
    return scanner  # type: ignore[return-value]


def _brackets(depth: int) -> str:
    return "[" * depth + "]" * depth


class TestDepthBoundary:
    """Exactly MAX_DEPTH levels are allowed."""

    def test_at_limit(self) -> None:
        """MAX_DEPTH nested lists scan."""
        value, consumed = _nested(MAX_DEPTH).scan_from(_brackets(MAX_DEPTH))

        assert consumed == 2 * MAX_DEPTH
        assert current_depth() == 0
        assert isinstance(value, list)

    def test_beyond_limit(self) -> None:
        """One more level raises and leaves no depth behind."""
        with pytest.raises(DepthLimitExceededError):
            _nested(MAX_DEPTH + 1).scan_from(_brackets(MAX_DEPTH + 1))

        assert current_depth() == 0

    @given(st.integers(min_value=MAX_DEPTH + 1, max_value=MAX_DEPTH * 3))
    @settings(max_examples=20)
    def test_input_deeper_than_scanner(self, depth: int) -> None:
        """Deep input against a deep scanner never reaches RecursionError."""
        with pytest.raises(DepthLimitExceededError):
            _nested(depth).scan_from(_brackets(depth))

        assert current_depth() == 0


class TestDepthIsolation:
    """Depth is tracked per thread."""

    def test_concurrent_nesting(self) -> None:
        """Threads scanning deep input do not share depth."""
        depth = MAX_DEPTH - 1
        scanner = _nested(depth)
        text = _brackets(depth)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: scanner.scan_from(text)[1], range(32)))

        assert results == [2 * depth] * 32
