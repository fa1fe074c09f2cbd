"""Diagnostic system for scanrules errors.

Provides structured error diagnostics with codes, offsets and hints.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, ErrorCategory
from .errors import (
    DepthLimitExceededError,
    PatternError,
    ScanError,
    ScanRulesError,
    furthest_along,
)
from .templates import ErrorTemplate

__all__ = [
    "DepthLimitExceededError",
    "Diagnostic",
    "DiagnosticCode",
    "ErrorCategory",
    "ErrorTemplate",
    "PatternError",
    "ScanError",
    "ScanRulesError",
    "furthest_along",
]
