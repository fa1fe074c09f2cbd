"""Terms: the building blocks of a rule.

A rule is a sequence of terms evaluated left to right against a cursor
that is threaded through them:

    Literal     match literal text under the cursor's policy
    Capture     run a scanner and bind its value
    Remainder   bind all remaining input (tail, must be last)
    Anchor      bind the cursor itself (tail, must be last)
    Repeat      quantified sub-sequence (see rules.engine)

Every term binds values under a name, or positionally when the name is
None. Plain strings stand for literals; anything else that is not a Term
stands for an anonymous capture.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from scanrules.diagnostics import ErrorTemplate, PatternError
from scanrules.scanner.protocol import ScanFromStr, resolve_scanner
from scanrules.syntax.literal import check_literal

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scanrules.syntax.cursor import Cursor
    from scanrules.syntax.policies import ScanPolicy

__all__ = [
    "Anchor",
    "Bindings",
    "Capture",
    "Literal",
    "Remainder",
    "Term",
    "anchor",
    "as_term",
    "as_terms",
    "capture",
    "check_terms",
    "literal",
    "remainder",
]


class Bindings:
    """Values bound while evaluating one rule (or one repetition pass).

    Attributes:
        named: Values bound by name, in binding order
        positional: Values bound without a name, in binding order
    """

    __slots__ = ("named", "positional")

    def __init__(self) -> None:
        self.named: dict[str, object] = {}
        self.positional: list[object] = []

    def bind(self, name: str | None, value: object) -> None:
        """Bind ``value`` under ``name`` (positionally if name is None)."""
        if name is None:
            self.positional.append(value)
        else:
            self.named[name] = value


class Term:
    """Base class for rule terms.

    Subclasses implement ``evaluate``, which returns the advanced cursor or
    raises ScanError, and ``binds``, which lists the names the term binds
    (None for a positional binding) so rules can validate their captures
    before any input is seen.
    """

    __slots__ = ()

    # Tail terms end a rule and switch off the end-of-input check.
    is_tail: ClassVar[bool] = False

    def binds(self) -> tuple[str | None, ...]:
        """Names this term binds, None for positional bindings."""
        return ()

    def check(self, policy: ScanPolicy) -> None:
        """Validate the term against a grammar's policy.

        Raises:
            PatternError: If the term can never be meaningful
        """

    def evaluate(self, cursor: Cursor, bindings: Bindings) -> Cursor:
        """Evaluate the term at ``cursor``.

        Raises:
            ScanError: If the input does not match
        """
        raise NotImplementedError


class Literal(Term):
    """Literal text, matched word by word under the cursor's policy."""

    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text

    def check(self, policy: ScanPolicy) -> None:
        check_literal(self.text, policy)

    def evaluate(self, cursor: Cursor, bindings: Bindings) -> Cursor:
        return cursor.try_match_literal(self.text)

    def __repr__(self) -> str:
        return f"Literal({self.text!r})"


class Capture(Term):
    """Scan a value and bind it.

    The scanner is resolved when the term is built, so an unknown type
    fails immediately with PatternError.
    """

    __slots__ = ("name", "scanner", "target")

    def __init__(self, target: object, name: str | None = None) -> None:
        self.target = target
        self.scanner: ScanFromStr[object] = resolve_scanner(target)
        self.name = name

    def binds(self) -> tuple[str | None, ...]:
        return (self.name,)

    def evaluate(self, cursor: Cursor, bindings: Bindings) -> Cursor:
        value, after = cursor.try_scan(self.scanner)
        bindings.bind(self.name, value)
        return after

    def __repr__(self) -> str:
        target = getattr(self.target, "__name__", None) or repr(self.target)
        if self.name is None:
            return f"Capture({target})"
        return f"Capture({target}, name={self.name!r})"


class Remainder(Term):
    """Bind everything left in the input, whitespace included, as a str."""

    __slots__ = ("name",)

    is_tail: ClassVar[bool] = True

    def __init__(self, name: str | None = None) -> None:
        self.name = name

    def binds(self) -> tuple[str | None, ...]:
        return (self.name,)

    def evaluate(self, cursor: Cursor, bindings: Bindings) -> Cursor:
        rest = cursor.as_str()
        bindings.bind(self.name, rest)
        return cursor.advance(len(rest))

    def __repr__(self) -> str:
        return f"Remainder({self.name!r})"


class Anchor(Term):
    """Bind the cursor at this point without consuming anything.

    Useful for a hand-written scanner that runs a rule and needs to know
    how far it got.
    """

    __slots__ = ("name",)

    is_tail: ClassVar[bool] = True

    def __init__(self, name: str | None = None) -> None:
        self.name = name

    def binds(self) -> tuple[str | None, ...]:
        return (self.name,)

    def evaluate(self, cursor: Cursor, bindings: Bindings) -> Cursor:
        bindings.bind(self.name, cursor)
        return cursor

    def __repr__(self) -> str:
        return f"Anchor({self.name!r})"


# ============================================================================
# BUILDERS
# ============================================================================


def literal(text: str) -> Literal:
    """Build a literal term."""
    return Literal(text)


def capture(target: object, name: str | None = None) -> Capture:
    """Build a capture term.

    Args:
        target: Scanner, scanner class, registered type or ScanSelfFromStr
            subclass
        name: Name to bind the value under (positional if omitted)

    Raises:
        PatternError: If ``target`` cannot be resolved to a scanner

    Example:
        >>> from scanrules.rules.engine import Rule
        >>> Rule("age:", capture(int, "age")).scan("age: 42")["age"]
        42
    """
    return Capture(target, name)


def remainder(name: str | None = None) -> Remainder:
    """Build a tail term binding the rest of the input."""
    return Remainder(name)


def anchor(name: str | None = None) -> Anchor:
    """Build a tail term binding the cursor."""
    return Anchor(name)


def as_term(item: object) -> Term:
    """Coerce shorthand into a term: str is a literal, other non-terms capture."""
    if isinstance(item, Term):
        return item
    if isinstance(item, str):
        return Literal(item)
    return Capture(item)


def as_terms(items: Iterable[object]) -> tuple[Term, ...]:
    """Coerce a sequence of shorthand items into terms."""
    return tuple(as_term(item) for item in items)


def check_terms(terms: tuple[Term, ...], *, allow_tail: bool = True) -> None:
    """Validate term placement and capture names.

    Raises:
        PatternError: If a tail term is not last (or appears where tails
            are not allowed), or if a capture name is bound twice
    """
    for index, term in enumerate(terms):
        if term.is_tail and (not allow_tail or index != len(terms) - 1):
            raise PatternError(ErrorTemplate.tail_not_last(repr(term)))

    seen: set[str] = set()
    for term in terms:
        for name in term.binds():
            if name is None:
                continue
            if name in seen:
                raise PatternError(ErrorTemplate.capture_duplicate(name))
            seen.add(name)
