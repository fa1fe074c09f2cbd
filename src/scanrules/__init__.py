"""scanrules - scanf-style structured text scanning with ordered rules.

Input is scanned against an ordered list of rules. Each rule is a sequence
of literal text, typed captures and bounded repetitions; the first rule
that matches wins, and when none does, the error that got furthest into
the input is raised.

Public API:
    scan - Scan input against rules, raising ScanError
    try_scan - Non-raising scan returning (value, error)
    let_scan - Scan with one rule, returning its Captures
    readln / try_readln - Read a line from a stream and scan it
    Rule, Grammar - Rules and ordered alternation
    capture, literal, remainder, anchor - Term builders
    repeat, optional, zero_or_more, one_or_more, exactly - Repetition
    register_scanner - Make a scanner the default for a type

Exceptions:
    ScanRulesError - Base exception class
    ScanError - Input did not match (recoverable)
    PatternError - Malformed rule (programming error)
    DepthLimitExceededError - Grammar nesting too deep

Submodules:
    scanrules.scanner - Scanner protocol and built-in scanners
    scanrules.syntax - Cursor, policies and literal matching
    scanrules.diagnostics - Error types, codes and formatting
    scanrules.core - Nesting guard and Babel compatibility
"""

from .diagnostics import (
    DepthLimitExceededError,
    PatternError,
    ScanError,
    ScanRulesError,
)
from .enums import ScanErrorKind
from .rules import (
    Captures,
    Grammar,
    Rule,
    anchor,
    capture,
    exactly,
    let_scan,
    literal,
    one_or_more,
    optional,
    readln,
    remainder,
    repeat,
    scan,
    try_readln,
    try_scan,
    zero_or_more,
)
from .scanner import ScanSelfFromStr, register_scanner
from .syntax import Cursor, ScanPolicy

# Version information - Auto-populated from package metadata
try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _get_version
except ImportError as e:
    raise RuntimeError("importlib.metadata unavailable - Python version too old? " + str(e)) from e

try:
    __version__ = _get_version("scanrules")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "Captures",
    "Cursor",
    "DepthLimitExceededError",
    "Grammar",
    "PatternError",
    "Rule",
    "ScanError",
    "ScanErrorKind",
    "ScanPolicy",
    "ScanRulesError",
    "ScanSelfFromStr",
    "__version__",
    "anchor",
    "capture",
    "exactly",
    "let_scan",
    "literal",
    "one_or_more",
    "optional",
    "readln",
    "register_scanner",
    "remainder",
    "repeat",
    "scan",
    "try_readln",
    "try_scan",
    "zero_or_more",
]
