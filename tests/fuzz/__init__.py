"""Fuzz testing for scanrules.

This package contains:
- test_scanner_property: round-trip properties for the built-in scanners
- test_grammar_property: error offset and alternation invariants on arbitrary input
- test_depth_exhaustion: boundary testing for grammar nesting limits

Python 3.13+.
"""
