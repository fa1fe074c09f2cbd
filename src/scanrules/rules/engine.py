"""Rule evaluation: ordered alternation and bounded repetition.

A Grammar holds an ordered list of rules. Scanning tries each rule from the
same starting cursor and returns the first one that matches completely;
there is no ambiguity resolution beyond first-match-wins. When every rule
fails, the error that got furthest into the input is raised, because the
rule that got furthest is most likely the one the input was written for.

Backtracking is free: cursors are immutable, so retrying a rule is just
reusing the starting cursor.

Architecture:
    Grammar.scan / scan_prefix / scan_from
        -> _alternate (NestingGuard, furthest-along error selection)
            -> Rule.evaluate (terms left to right, optional try_end)
                -> Term.evaluate (Literal, Capture, Repeat, ...)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import ClassVar

from scanrules.constants import MAX_DEPTH, MAX_INPUT_SIZE
from scanrules.core.depth_guard import NestingGuard, depth_clamp
from scanrules.diagnostics import ErrorTemplate, PatternError, ScanError
from scanrules.enums import Repeats
from scanrules.rules.terms import Bindings, Term, as_terms, check_terms
from scanrules.syntax.cursor import Cursor, ScanResult
from scanrules.syntax.policies import DEFAULT_POLICY, ScanPolicy

__all__ = [
    "Captures",
    "Grammar",
    "Repeat",
    "Rule",
    "exactly",
    "one_or_more",
    "optional",
    "repeat",
    "zero_or_more",
]

logger = logging.getLogger(__name__)


def _evaluate_sequence(terms: tuple[Term, ...], cursor: Cursor, bindings: Bindings) -> Cursor:
    for term in terms:
        cursor = term.evaluate(cursor, bindings)
    return cursor


# ============================================================================
# CAPTURES
# ============================================================================


class Captures(Mapping[str, object]):
    """Values a rule bound, returned when the rule has no action.

    Named captures are available by key; positional (anonymous) captures
    are in ``args``, in the order they were bound.

    Example:
        >>> caps = Captures({"w": 80, "h": 24}, ("px",))
        >>> caps["w"], caps.args
        (80, ('px',))
        >>> caps == {"w": 80, "h": 24}
        True
    """

    __slots__ = ("_named", "args")

    def __init__(
        self,
        named: Mapping[str, object] | None = None,
        args: tuple[object, ...] = (),
    ) -> None:
        self._named: dict[str, object] = dict(named or {})
        self.args = args

    def __getitem__(self, key: str) -> object:
        return self._named[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._named)

    def __len__(self) -> int:
        return len(self._named)

    def __repr__(self) -> str:
        if self.args:
            return f"Captures({self._named!r}, args={self.args!r})"
        return f"Captures({self._named!r})"


# ============================================================================
# RULE
# ============================================================================


class Rule:
    """A sequence of terms plus the computation producing the rule's value.

    Terms may be given as shorthand: a ``str`` is a literal; a scanner,
    scanner class or registered type is an anonymous capture.

    Args:
        *terms: Terms, evaluated left to right
        action: Called as ``action(*positional, **named)`` with the bound
            values. Without an action the rule produces a ``Captures``.
        require_end: Whether only skippable whitespace may remain after
            the last term. Rules ending in a tail term never check.

    Raises:
        PatternError: For a tail term that is not last or a capture name
            bound twice

    Example:
        >>> from scanrules.rules.terms import capture
        >>> rule = Rule(capture(int, "x"), ",", capture(int, "y"), action=lambda x, y: x * y)
        >>> rule.scan("6, 7")
        42
    """

    __slots__ = ("action", "require_end", "terms")

    def __init__(
        self,
        *terms: object,
        action: Callable[..., object] | None = None,
        require_end: bool = True,
    ) -> None:
        self.terms: tuple[Term, ...] = as_terms(terms)
        check_terms(self.terms)
        self.action = action
        ends_in_tail = bool(self.terms) and self.terms[-1].is_tail
        self.require_end = require_end and not ends_in_tail

    def check(self, policy: ScanPolicy) -> None:
        """Validate every term against ``policy``."""
        for term in self.terms:
            term.check(policy)

    def evaluate(self, cursor: Cursor, *, require_end: bool = True) -> ScanResult[object]:
        """Evaluate the rule at ``cursor``.

        Raises:
            ScanError: From the first term that fails, or EXPECTED_END
        """
        bindings = Bindings()
        cursor = _evaluate_sequence(self.terms, cursor, bindings)
        if require_end and self.require_end:
            cursor.try_end()
        if self.action is None:
            value: object = Captures(bindings.named, tuple(bindings.positional))
        else:
            value = self.action(*bindings.positional, **bindings.named)
        return ScanResult(value, cursor)

    def scan(self, source: str | Cursor) -> object:
        """Scan ``source`` with this rule alone."""
        return Grammar(self).scan(source)

    def __repr__(self) -> str:
        terms = ", ".join(repr(term) for term in self.terms)
        return f"Rule({terms})"


def _as_rule(item: object) -> Rule:
    if isinstance(item, Rule):
        return item
    if isinstance(item, (tuple, list)):
        return Rule(*item)
    return Rule(item)


# ============================================================================
# GRAMMAR (ALTERNATION)
# ============================================================================


class Grammar:
    """Ordered alternation over rules.

    A Grammar is also a scanner: ``scan_from`` scans a prefix without
    requiring the end of input, so grammars can be captured inside other
    rules. Each evaluation is counted by a NestingGuard, which bounds
    recursion through nested grammars.

    Args:
        *rules: Rules in priority order. A tuple or list is shorthand for
            ``Rule(*items)``; any other single item for ``Rule(item)``.
        policy: Literal and whitespace policy (default: DEFAULT_POLICY)
        max_input_size: Maximum input length in characters
            (default: MAX_INPUT_SIZE; 0 disables the check)
        max_nesting_depth: Maximum grammar nesting (default: MAX_DEPTH),
            clamped against the interpreter recursion limit

    Raises:
        PatternError: For an empty rule list, or a literal the policy
            reduces to nothing

    Example:
        >>> grammar = Grammar(
        ...     Rule("yes", action=lambda: True),
        ...     Rule("no", action=lambda: False),
        ... )
        >>> grammar.scan("  no ")
        False
    """

    __slots__ = ("_max_input_size", "_max_nesting_depth", "policy", "rules")

    wants_leading_junk_stripped: ClassVar[bool] = True

    def __init__(
        self,
        *rules: object,
        policy: ScanPolicy | None = None,
        max_input_size: int | None = None,
        max_nesting_depth: int | None = None,
    ) -> None:
        if not rules:
            raise PatternError(ErrorTemplate.no_rules())
        self.rules: tuple[Rule, ...] = tuple(_as_rule(rule) for rule in rules)
        self.policy = policy if policy is not None else DEFAULT_POLICY
        for rule in self.rules:
            rule.check(self.policy)
        self._max_input_size = max_input_size if max_input_size is not None else MAX_INPUT_SIZE
        self._max_nesting_depth = depth_clamp(
            max_nesting_depth if max_nesting_depth is not None else MAX_DEPTH
        )

    @property
    def max_input_size(self) -> int:
        """Maximum accepted input length in characters."""
        return self._max_input_size

    @property
    def max_nesting_depth(self) -> int:
        """Effective (clamped) nesting limit."""
        return self._max_nesting_depth

    def scan(self, source: str | Cursor) -> object:
        """Scan ``source`` completely and return the first matching rule's value.

        Args:
            source: Input text, or a cursor to continue from

        Raises:
            ScanError: The furthest-along error if every rule fails
            ValueError: If the input exceeds ``max_input_size``
        """
        return self._alternate(self._cursor(source), require_end=True).value

    def scan_prefix(self, source: str | Cursor) -> ScanResult[object]:
        """Scan a prefix of ``source``; trailing input is left unconsumed.

        Returns:
            The value and the cursor after the matching rule
        """
        return self._alternate(self._cursor(source), require_end=False)

    def scan_from(self, text: str) -> tuple[object, int]:
        """Scanner protocol entry point: ``(value, consumed)``."""
        result = self.scan_prefix(text)
        return (result.value, result.cursor.offset)

    def _cursor(self, source: str | Cursor) -> Cursor:
        if isinstance(source, Cursor):
            cursor = source.with_policy(self.policy)
        else:
            cursor = Cursor(source, 0, self.policy)
        size = len(cursor.source)
        if self._max_input_size > 0 and size > self._max_input_size:
            diagnostic = ErrorTemplate.input_too_large(size, self._max_input_size)
            raise ValueError(diagnostic.message)
        return cursor

    def _alternate(self, cursor: Cursor, *, require_end: bool) -> ScanResult[object]:
        with NestingGuard(self._max_nesting_depth):
            error: ScanError | None = None
            for index, rule in enumerate(self.rules):
                try:
                    result = rule.evaluate(cursor, require_end=require_end)
                except ScanError as err:
                    logger.debug(
                        "Rule %d of %d failed at offset %d: %s",
                        index,
                        len(self.rules),
                        err.offset,
                        err.message,
                    )
                    error = err if error is None else error.furthest_along(err)
                    continue
                logger.debug("Rule %d matched up to offset %d", index, result.cursor.offset)
                return result

        # rules is never empty, so at least one error was recorded
        assert error is not None  # noqa: S101
        relocated = error.with_cursor(cursor)
        raise relocated from relocated.cause

    def __repr__(self) -> str:
        return f"Grammar({len(self.rules)} rules)"


# ============================================================================
# REPETITION
# ============================================================================


class Repeat(Term):
    """Quantified sub-sequence, optionally separated.

    Evaluation:
        1. Stop if ``max`` matches have been made.
        2. After the first match, scan the separator. If it fails, stop.
        3. Scan the element. On success, accumulate its bindings and loop.
        4. An element that fails right after a matched separator fails the
           whole repetition: a dangling separator is an error.
        5. With fewer than ``min`` matches, fail with the last error.

    The cursor afterwards sits after the last matched element, never after
    a separator or element that failed.

    Named captures inside the element (or separator) are collected per
    name with ``collect``. Positional captures are collected into one
    positional value: one entry per match, a tuple when a match binds
    several. Positional captures in the separator are not kept.

    Note:
        An element that can match without consuming input is not guarded
        against. It repeats until ``max``; with ``max=None`` it never stops.

    Raises:
        PatternError: For negative bounds, ``min > max``, or a tail term
            inside the repetition
    """

    __slots__ = ("collect", "max", "min", "sep", "terms")

    def __init__(
        self,
        *terms: object,
        sep: object = None,
        min: int = 0,  # noqa: A002
        max: int | None = None,  # noqa: A002
        collect: Callable[[list[object]], object] = list,
    ) -> None:
        if min < 0 or (max is not None and (max < 0 or min > max)):
            raise PatternError(ErrorTemplate.repeat_bounds_invalid(min, max))
        self.terms: tuple[Term, ...] = as_terms(terms)
        self.sep: tuple[Term, ...] = _as_separator(sep)
        check_terms(self.terms + self.sep, allow_tail=False)
        self.min = min
        self.max = max
        self.collect = collect

    def binds(self) -> tuple[str | None, ...]:
        names: list[str | None] = [
            name for term in self.terms + self.sep for name in term.binds() if name is not None
        ]
        if self._has_positional():
            names.append(None)
        return tuple(names)

    def check(self, policy: ScanPolicy) -> None:
        for term in self.terms + self.sep:
            term.check(policy)

    def _has_positional(self) -> bool:
        return any(name is None for term in self.terms for name in term.binds())

    def evaluate(self, cursor: Cursor, bindings: Bindings) -> Cursor:
        named: dict[str, list[object]] = {
            name: [] for name in self.binds() if name is not None
        }
        positional: list[object] = []
        count = 0
        last_error: ScanError | None = None

        while True:
            if self.max is not None and count >= self.max:
                stop = Repeats.MAX_REACHED
                break

            step = Bindings()
            attempt = cursor
            after_separator = False
            if count > 0 and self.sep:
                try:
                    attempt = _evaluate_sequence(self.sep, cursor, step)
                except ScanError as err:
                    last_error = err
                    stop = Repeats.SEPARATOR_FAILED
                    break
                after_separator = True
                # Separator positionals are dropped
                step.positional.clear()

            try:
                after = _evaluate_sequence(self.terms, attempt, step)
            except ScanError as err:
                if after_separator:
                    logger.debug(
                        "Repetition failed: separator at offset %d not followed by an element",
                        cursor.offset,
                    )
                    raise
                last_error = err
                stop = Repeats.ELEMENT_FAILED
                break

            for name, value in step.named.items():
                named[name].append(value)
            if step.positional:
                positional.append(
                    step.positional[0] if len(step.positional) == 1 else tuple(step.positional)
                )
            count += 1
            cursor = after

        logger.debug("Repetition stopped after %d matches (%s)", count, stop)
        if count < self.min:
            # count < min <= max, so the loop ended on a failure
            assert last_error is not None  # noqa: S101
            raise last_error

        for name, values in named.items():
            bindings.bind(name, self.collect(values))
        if self._has_positional():
            bindings.bind(None, self.collect(positional))
        return cursor

    def __repr__(self) -> str:
        terms = ", ".join(repr(term) for term in self.terms)
        bounds = f"min={self.min}, max={self.max}"
        if self.sep:
            return f"Repeat({terms}, sep={self.sep!r}, {bounds})"
        return f"Repeat({terms}, {bounds})"


def _as_separator(sep: object) -> tuple[Term, ...]:
    if sep is None:
        return ()
    if isinstance(sep, (tuple, list)):
        return as_terms(sep)
    return as_terms((sep,))


def _first_or_none(values: Iterable[object]) -> object:
    return next(iter(values), None)


def repeat(
    *terms: object,
    sep: object = None,
    min: int = 0,  # noqa: A002
    max: int | None = None,  # noqa: A002
    collect: Callable[[list[object]], object] = list,
) -> Repeat:
    """Build a repetition term.

    Args:
        *terms: The element sub-sequence
        sep: Separator sub-sequence (str, term, or tuple of them)
        min: Minimum number of matches
        max: Maximum number of matches (None for unbounded)
        collect: Builds each collected value from a list, for example
            ``list``, ``tuple``, ``set`` or ``collections.deque``

    Example:
        >>> from scanrules.rules.terms import capture
        >>> Rule(repeat(capture(int, "n"), sep=",")).scan("1, 2, 3")["n"]
        [1, 2, 3]
    """
    return Repeat(*terms, sep=sep, min=min, max=max, collect=collect)


def optional(
    *terms: object,
    collect: Callable[[list[object]], object] = _first_or_none,
) -> Repeat:
    """Match the terms zero or one time.

    By default each capture inside binds its value, or None when the terms
    did not match.
    """
    return Repeat(*terms, min=0, max=1, collect=collect)


def zero_or_more(
    *terms: object,
    sep: object = None,
    collect: Callable[[list[object]], object] = list,
) -> Repeat:
    """Match the terms any number of times."""
    return Repeat(*terms, sep=sep, min=0, max=None, collect=collect)


def one_or_more(
    *terms: object,
    sep: object = None,
    collect: Callable[[list[object]], object] = list,
) -> Repeat:
    """Match the terms at least once."""
    return Repeat(*terms, sep=sep, min=1, max=None, collect=collect)


def exactly(
    count: int,
    *terms: object,
    sep: object = None,
    collect: Callable[[list[object]], object] = list,
) -> Repeat:
    """Match the terms exactly ``count`` times."""
    return Repeat(*terms, sep=sep, min=count, max=count, collect=collect)
