"""Tests for core/depth_guard.py.

Tests NestingGuard context-local depth tracking and depth_clamp().

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
import threading

import pytest
from hypothesis import given
from hypothesis import strategies as st

from scanrules.constants import MAX_DEPTH
from scanrules.core.depth_guard import NestingGuard, current_depth, depth_clamp
from scanrules.diagnostics import DepthLimitExceededError, DiagnosticCode


def _max_safe_depth() -> int:
    return max(1, (sys.getrecursionlimit() - 50) // 16)


# ============================================================================
# Construction
# ============================================================================


class TestNestingGuardConstruction:
    """Test NestingGuard construction and defaults."""

    def test_default_construction(self) -> None:
        """NestingGuard uses MAX_DEPTH by default (clamped)."""
        assert NestingGuard().max_depth == min(MAX_DEPTH, _max_safe_depth())

    def test_custom_max_depth(self) -> None:
        """NestingGuard accepts a custom max_depth."""
        assert NestingGuard(max_depth=5).max_depth == 5

    def test_huge_depth_is_clamped(self) -> None:
        """Depths the recursion limit cannot support are clamped."""
        assert NestingGuard(max_depth=10**6).max_depth == _max_safe_depth()


# ============================================================================
# Context Manager
# ============================================================================


class TestNestingGuardContext:
    """Test depth tracking through nested with-blocks."""

    def test_depth_increments_and_restores(self) -> None:
        """Each nested guard adds one; leaving restores it."""
        assert current_depth() == 0
        with NestingGuard(5):
            assert current_depth() == 1
            with NestingGuard(5):
                assert current_depth() == 2
            assert current_depth() == 1
        assert current_depth() == 0

    def test_exceeding_raises(self) -> None:
        """Entering beyond max_depth raises before incrementing."""
        with NestingGuard(1), pytest.raises(DepthLimitExceededError) as exc_info, NestingGuard(1):
            pass

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.MAX_DEPTH_EXCEEDED
        assert current_depth() == 0

    def test_depth_restored_after_exception(self) -> None:
        """An exception inside the block still restores the depth."""
        with pytest.raises(RuntimeError), NestingGuard(3):
            raise RuntimeError

        assert current_depth() == 0

    def test_threads_have_independent_depth(self) -> None:
        """A new thread starts at depth 0."""
        seen: list[int] = []

        def worker() -> None:
            seen.append(current_depth())

        with NestingGuard(5):
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join()

        assert seen == [0]

    @given(depth=st.integers(min_value=1, max_value=20))
    def test_exactly_max_depth_levels_fit(self, depth: int) -> None:
        """max_depth nested guards succeed; one more fails."""

        def enter(level: int) -> None:
            with NestingGuard(depth):
                if level < depth:
                    enter(level + 1)

        def too_deep(level: int) -> None:
            with NestingGuard(depth):
                too_deep(level + 1)

        enter(1)
        with pytest.raises(DepthLimitExceededError):
            too_deep(1)
        assert current_depth() == 0


# ============================================================================
# depth_clamp
# ============================================================================


class TestDepthClamp:
    """Test clamping against the interpreter recursion limit."""

    def test_small_depth_unchanged(self) -> None:
        """Depths within the limit pass through."""
        assert depth_clamp(10) == 10

    def test_large_depth_clamped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Clamping logs a warning naming the recursion limit."""
        with caplog.at_level(logging.WARNING, logger="scanrules.core.depth_guard"):
            result = depth_clamp(10**6)

        assert result == _max_safe_depth()
        assert "Clamping" in caplog.text

    def test_reserve_frames(self) -> None:
        """A larger reserve lowers the safe depth."""
        limit = sys.getrecursionlimit()

        assert depth_clamp(10**6, reserve_frames=limit) == 1
