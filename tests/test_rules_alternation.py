"""Tests for Grammar: ordered alternation, error selection and limits."""

from __future__ import annotations

import logging

import pytest

from scanrules.diagnostics import (
    DepthLimitExceededError,
    DiagnosticCode,
    PatternError,
    ScanError,
)
from scanrules.enums import ScanErrorKind
from scanrules.rules import Grammar, Rule, capture
from scanrules.scanner.misc import Word
from scanrules.scanner.protocol import Scanner
from scanrules.syntax import Cursor, IgnoreAsciiCase, ScanPolicy


def _scan_error(grammar: Grammar, text: str) -> ScanError:
    with pytest.raises(ScanError) as exc_info:
        grammar.scan(text)
    return exc_info.value


class _CountingWord(Scanner[str]):
    """Word scanner that records how often it ran."""

    def __init__(self) -> None:
        self.calls = 0

    def scan_from(self, text: str) -> tuple[str, int]:
        self.calls += 1
        return Word.scan_from(text)


def _parens(max_nesting_depth: int) -> Grammar:
    """Grammar counting balanced parentheses around an ``x``, recursively."""
    grammars: list[Grammar] = []

    class Nested(Scanner[int]):
        def scan_from(self, text: str) -> tuple[int, int]:
            return grammars[0].scan_from(text)  # type: ignore[return-value]

    grammar = Grammar(
        Rule("(", capture(Nested(), "depth"), ")", action=lambda depth: depth + 1),
        Rule("x", action=lambda: 0),
        max_nesting_depth=max_nesting_depth,
    )
    grammars.append(grammar)
    return grammar


# ============================================================================
# ORDERED ALTERNATION
# ============================================================================


class TestFirstMatchWins:
    """Rules are tried in order."""

    def test_first_matching_rule(self) -> None:
        """Earlier rules take priority even when later ones also match."""
        grammar = Grammar(
            Rule(capture(int, "n"), action=lambda n: ("int", n)),
            Rule(capture(Word, "w"), action=lambda w: ("word", w)),
        )

        assert grammar.scan("42") == ("int", 42)
        assert grammar.scan("forty") == ("word", "forty")

    def test_later_rules_not_tried(self) -> None:
        """Evaluation stops at the first success."""
        counter = _CountingWord()
        grammar = Grammar(Rule("a", action=lambda: 1), Rule(capture(counter)))

        assert grammar.scan("a") == 1
        assert counter.calls == 0

    def test_shorthand_rules(self) -> None:
        """Tuples are rules; single items are one-term rules."""
        grammar = Grammar(("set", int), int)

        assert grammar.scan("set 5").args == (5,)  # type: ignore[attr-defined]
        assert grammar.scan("7").args == (7,)  # type: ignore[attr-defined]

    def test_rule_must_reach_end(self) -> None:
        """A rule that leaves input behind fails with EXPECTED_END."""
        err = _scan_error(Grammar(Rule("a")), "a b")

        assert err.kind == ScanErrorKind.EXPECTED_END
        assert err.offset == 2

    def test_trailing_whitespace_is_fine(self) -> None:
        """Skippable whitespace may remain."""
        assert Grammar(Rule("a", action=lambda: "ok")).scan("  a  \n") == "ok"


class TestFurthestError:
    """When every rule fails, the furthest error is raised."""

    @pytest.mark.parametrize("reverse", [False, True], ids=["short_first", "long_first"])
    def test_furthest_along_wins(self, reverse: bool) -> None:
        """The rule that got further explains the failure, whatever the order."""
        rules = [Rule("a", "x"), Rule("a", "b", "c")]
        if reverse:
            rules.reverse()

        err = _scan_error(Grammar(*rules), "a b d")

        assert err.kind == ScanErrorKind.LITERAL_MISMATCH
        assert err.offset == 4

    def test_tie_keeps_earlier_rule(self) -> None:
        """Among equally far errors, the first rule's is reported."""
        err = _scan_error(Grammar(Rule("a", int), Rule("a", "b")), "a z")

        assert err.offset == 2
        assert err.kind == ScanErrorKind.SYNTAX

    def test_error_carries_starting_cursor(self) -> None:
        """The error's cursor is where the grammar started."""
        err = _scan_error(Grammar(Rule("a", "b")), "a c")

        assert err.cursor is not None
        assert err.cursor.offset == 0

    def test_format_error_points_at_failure(self) -> None:
        """The rendered error shows the offending position."""
        err = _scan_error(Grammar(Rule("set", int)), "set x")

        assert err.format_error("set x") == "1:5: expected an integer"


# ============================================================================
# GRAMMAR AS SCANNER
# ============================================================================


class TestGrammarAsScanner:
    """Grammars can be captured inside other rules."""

    def test_nested_capture(self) -> None:
        """The inner grammar scans a prefix."""
        switch = Grammar(Rule("on", action=lambda: True), Rule("off", action=lambda: False))
        rule = Rule("switch", capture(switch, "state"), ";")

        assert rule.scan("switch off;")["state"] is False  # type: ignore[index]

    def test_scan_from(self) -> None:
        """scan_from returns the value and characters consumed."""
        assert Grammar(Rule(int, action=lambda n: n * 2)).scan_from("21 rest") == (42, 2)

    def test_scan_prefix(self) -> None:
        """scan_prefix returns the cursor after the match."""
        result = Grammar(Rule(int, action=lambda n: n)).scan_prefix("12 rest")

        assert result.value == 12
        assert result.cursor.offset == 2

    def test_scan_continues_from_cursor(self) -> None:
        """A cursor source resumes scanning where it stands."""
        cursor = Cursor("skip 5", 4)

        assert Grammar(Rule(int, action=lambda n: n)).scan(cursor) == 5


# ============================================================================
# POLICY AND LIMITS
# ============================================================================


class TestPolicy:
    """Grammar policy applies to every literal."""

    def test_case_insensitive(self) -> None:
        """A compare policy changes literal matching."""
        policy = ScanPolicy().with_compare(IgnoreAsciiCase())
        grammar = Grammar(Rule("hello", action=lambda: "hi"), policy=policy)

        assert grammar.scan("HeLLo") == "hi"
        assert _scan_error(Grammar(Rule("hello")), "HeLLo").kind == ScanErrorKind.LITERAL_MISMATCH

    def test_grammar_policy_overrides_cursor_policy(self) -> None:
        """A cursor passed in is re-policied."""
        policy = ScanPolicy().with_compare(IgnoreAsciiCase())
        cursor = Cursor("HELLO", 0, policy)

        with pytest.raises(ScanError) as exc_info:
            Grammar(Rule("hello")).scan(cursor)

        assert exc_info.value.kind == ScanErrorKind.LITERAL_MISMATCH


class TestConstruction:
    """Malformed grammars are pattern errors."""

    def test_no_rules(self) -> None:
        """A grammar needs at least one rule."""
        with pytest.raises(PatternError) as exc_info:
            Grammar()

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.NO_RULES

    def test_whitespace_only_literal(self) -> None:
        """A literal the space policy skips entirely is rejected."""
        with pytest.raises(PatternError) as exc_info:
            Grammar(Rule("a", "   "))

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.LITERAL_NO_TOKENS

    def test_repr(self) -> None:
        """repr counts the rules."""
        assert repr(Grammar(Rule("a"), Rule("b"))) == "Grammar(2 rules)"


class TestLimits:
    """Input size and nesting depth are bounded."""

    def test_input_too_large(self) -> None:
        """Oversized input is rejected before scanning."""
        grammar = Grammar(Rule(Word), max_input_size=3)

        with pytest.raises(ValueError, match="maximum size"):
            grammar.scan("abcd")

    def test_size_check_disabled(self) -> None:
        """max_input_size=0 disables the check."""
        grammar = Grammar(Rule(Word, action=len), max_input_size=0)

        assert grammar.scan("a" * 100) == 100
        assert grammar.max_input_size == 0

    def test_recursion_within_limit(self) -> None:
        """Self-recursive grammars nest up to the limit."""
        grammar = _parens(5)

        assert grammar.scan("x") == 0
        assert grammar.scan("((((x))))") == 4

    def test_recursion_beyond_limit(self) -> None:
        """One level more raises DepthLimitExceededError."""
        with pytest.raises(DepthLimitExceededError):
            _parens(5).scan("(((((x)))))")

    def test_depth_resets_after_failure(self) -> None:
        """A failed scan leaves no depth behind."""
        grammar = _parens(5)
        with pytest.raises(DepthLimitExceededError):
            grammar.scan("(((((x)))))")

        assert grammar.scan("((((x))))") == 4

    def test_nesting_depth_is_clamped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Absurd depths are clamped to the recursion limit."""
        with caplog.at_level(logging.WARNING, logger="scanrules.core.depth_guard"):
            grammar = Grammar(Rule("a"), max_nesting_depth=10**9)

        assert grammar.max_nesting_depth < 10**9
        assert "Clamping" in caplog.text


# ============================================================================
# LOGGING
# ============================================================================


class TestLogging:
    """Rule attempts are logged at debug level."""

    def test_rule_attempts_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Failures and the match are recorded."""
        grammar = Grammar(Rule("a"), Rule("b"))

        with caplog.at_level(logging.DEBUG, logger="scanrules.rules.engine"):
            grammar.scan("b")

        assert "Rule 0 of 2 failed at offset 0" in caplog.text
        assert "Rule 1 matched up to offset 1" in caplog.text
