"""Rules, grammars and the scan entry points.

Python 3.13+.
"""

from .engine import (
    Captures,
    Grammar,
    Repeat,
    Rule,
    exactly,
    one_or_more,
    optional,
    repeat,
    zero_or_more,
)
from .entry import let_scan, readln, scan, try_readln, try_scan
from .terms import (
    Anchor,
    Capture,
    Literal,
    Remainder,
    Term,
    anchor,
    capture,
    literal,
    remainder,
)

__all__ = [
    "Anchor",
    "Capture",
    "Captures",
    "Grammar",
    "Literal",
    "Remainder",
    "Repeat",
    "Rule",
    "Term",
    "anchor",
    "capture",
    "exactly",
    "let_scan",
    "literal",
    "one_or_more",
    "optional",
    "readln",
    "remainder",
    "repeat",
    "scan",
    "try_readln",
    "try_scan",
    "zero_or_more",
]
