"""Whitespace and word-boundary aware literal matching.

The input and the literal are both broken into alternating whitespace runs
and words. Whitespace runs are reconciled by the space policy; words are
sliced by the word policy and compared by the compare policy. The literal
must be consumed completely; the input need not be.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from scanrules.diagnostics import ErrorTemplate, PatternError, ScanError
from scanrules.syntax.policies import DEFAULT_POLICY, ScanPolicy

__all__ = ["check_literal", "match_literal"]


def check_literal(literal: str, policy: ScanPolicy = DEFAULT_POLICY) -> None:
    """Reject a literal the policy would reduce to nothing.

    A non-empty literal consisting only of whitespace that the space policy
    skips has no tokens to compare and would match anywhere. That is a
    mistake in the rule, not a property of the input.

    Raises:
        PatternError: If the literal has no comparable tokens
    """
    if literal and policy.space.skip_leading(literal) == len(literal):
        raise PatternError(ErrorTemplate.literal_no_tokens(literal))


def match_literal(
    text: str,
    literal: str,
    policy: ScanPolicy = DEFAULT_POLICY,
    start: int = 0,
) -> int:
    """Match ``literal`` against ``text`` at ``start``.

    Args:
        text: Input text
        literal: Literal pattern
        policy: Strategies for whitespace, word slicing and comparison
        start: Index into ``text`` to match at

    Returns:
        Number of input characters consumed (leading skipped whitespace
        included). An empty literal consumes only skipped whitespace.

    Raises:
        ScanError: LITERAL_MISMATCH at the input offset (relative to
            ``start``) of the first disagreeing token
        PatternError: If the literal has no comparable tokens

    Example:
        >>> match_literal("a    b c", "a b")
        6
        >>> from scanrules.syntax.policies import IgnoreAsciiCase
        >>> match_literal("  Foo", "foo", ScanPolicy().with_compare(IgnoreAsciiCase()))
        5
    """
    check_literal(literal, policy)
    space = policy.space
    words = policy.words
    compare = policy.compare

    i = start + space.skip_leading(text, start)
    j = space.skip_leading(literal)

    while j < len(literal):
        matched = space.match_leading(text, literal, i, j)
        if matched is None:
            raise ScanError.literal_mismatch(i - start)
        i += matched[0]
        j += matched[1]
        if j >= len(literal):
            break

        pattern_len = words.slice_word(literal, j)
        text_len = words.slice_word(text, i)
        if (
            pattern_len is None
            or text_len is None
            or not compare.compare(text[i : i + text_len], literal[j : j + pattern_len])
        ):
            raise ScanError.literal_mismatch(i - start)
        i += text_len
        j += pattern_len

    return i - start
