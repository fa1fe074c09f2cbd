"""Lazy access to Babel for the locale-aware scanners.

Babel is an optional extra: `pip install scanrules[babel]`. Nothing outside
this module imports it at runtime, so the core scanners work without it and
LocaleDecimal fails with one clear message when it is missing:

    from scanrules.core.babel_compat import require_babel

    class LocaleScanner(Scanner[Decimal]):
        def __init__(self, locale_code: str) -> None:
            require_babel("LocaleScanner")
            locale = get_locale_class().parse(locale_code)

Babel types are still visible to type checkers through TYPE_CHECKING imports.

Python 3.13+.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from babel import Locale
    from babel.core import UnknownLocaleError as UnknownLocaleErrorType
    from babel.numbers import NumberFormatError as NumberFormatErrorType

__all__ = [
    "BabelImportError",
    "ParseDecimalFunc",
    "get_locale_class",
    "get_number_format_error_class",
    "get_parse_decimal_func",
    "get_unknown_locale_error_class",
    "is_babel_available",
    "require_babel",
]


# pylint: disable=unnecessary-ellipsis
class ParseDecimalFunc(Protocol):
    """Signature of babel.numbers.parse_decimal as used by scanrules."""

    def __call__(
        self,
        string: str,
        locale: Locale | str | None = None,
        strict: bool = False,
    ) -> Decimal:
        """Parse a localized decimal string."""
        ...
# pylint: enable=unnecessary-ellipsis


@lru_cache(maxsize=1)
def _check_babel_available() -> bool:
    """Import Babel once and remember whether it worked."""
    try:
        import babel  # noqa: F401, PLC0415  # pylint: disable=unused-import

        return True
    except ImportError:
        return False


class BabelImportError(ImportError):
    """A locale-aware scanner was built without Babel installed.

    The message names the scanner and the extra that provides Babel.
    """

    def __init__(self, feature: str) -> None:
        """Record which scanner or helper needed Babel."""
        message = (
            f"{feature} requires Babel for CLDR locale data. "
            "Install with: pip install scanrules[babel]"
        )
        super().__init__(message)
        self.feature = feature


def is_babel_available() -> bool:
    """Whether the babel extra is installed."""
    return _check_babel_available()


def require_babel(feature: str) -> None:
    """Fail early, in a scanner constructor, when Babel is missing.

    Args:
        feature: Name of the feature requiring Babel (for error message)

    Raises:
        BabelImportError: If Babel is not installed
    """
    if not _check_babel_available():
        raise BabelImportError(feature)


def get_locale_class() -> type[Locale]:
    """Get the Babel Locale class.

    Raises:
        BabelImportError: If Babel is not installed
    """
    require_babel("get_locale_class")
    from babel import Locale  # noqa: PLC0415

    return Locale


def get_unknown_locale_error_class() -> type[UnknownLocaleErrorType]:
    """Get the Babel UnknownLocaleError exception class.

    Raises:
        BabelImportError: If Babel is not installed
    """
    require_babel("get_unknown_locale_error_class")
    from babel.core import UnknownLocaleError  # noqa: PLC0415

    return UnknownLocaleError


def get_number_format_error_class() -> type[NumberFormatErrorType]:
    """Get the Babel NumberFormatError exception class.

    Raises:
        BabelImportError: If Babel is not installed
    """
    require_babel("get_number_format_error_class")
    from babel.numbers import NumberFormatError  # noqa: PLC0415

    return NumberFormatError


def get_parse_decimal_func() -> ParseDecimalFunc:
    """Get babel.numbers.parse_decimal.

    Raises:
        BabelImportError: If Babel is not installed
    """
    require_babel("get_parse_decimal_func")
    from babel.numbers import parse_decimal  # noqa: PLC0415

    return parse_decimal
