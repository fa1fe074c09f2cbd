"""Core infrastructure shared by the scanner and rules packages.

Python 3.13+.
"""

from .babel_compat import BabelImportError, is_babel_available, require_babel
from .depth_guard import NestingGuard, current_depth, depth_clamp

__all__ = [
    "BabelImportError",
    "NestingGuard",
    "current_depth",
    "depth_clamp",
    "is_babel_available",
    "require_babel",
]
