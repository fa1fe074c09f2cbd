"""Locale-aware decimal scanner (requires the ``babel`` extra).

Number syntax differs by locale: "1,234.5" in en_US is "1.234,5" in de_DE
and "1 234,5" in fr_FR. LocaleDecimal finds the run of characters that can
make up a localized number and hands it to Babel's CLDR-backed
``parse_decimal``.

Python 3.13+. Requires Babel at construction time.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import TYPE_CHECKING

from scanrules.core.babel_compat import (
    get_locale_class,
    get_number_format_error_class,
    get_parse_decimal_func,
    get_unknown_locale_error_class,
    require_babel,
)
from scanrules.diagnostics import ErrorTemplate, PatternError, ScanError
from scanrules.scanner.protocol import Scanner, match_prefix

if TYPE_CHECKING:
    from babel import Locale

__all__ = ["LocaleDecimal"]

logger = logging.getLogger(__name__)

# Digits and the CLDR decimal/group symbols in common use: period, comma,
# apostrophe, right single quote, no-break space, narrow no-break space.
_LOCALE_NUMBER_RE = re.compile(r"[+-]?[\d.,'\u2019\u00a0\u202f]*\d")


class LocaleDecimal(Scanner[Decimal]):
    """Scans a decimal number written for a locale.

    Args:
        locale_code: CLDR locale identifier such as ``"de_DE"`` or ``"en-US"``

    Raises:
        BabelImportError: If Babel is not installed
        PatternError: If the locale is unknown

    Example:
        >>> LocaleDecimal("de_DE").scan_from("1.234,5 EUR")
        (Decimal('1234.5'), 7)
    """

    __slots__ = ("_locale", "locale_code")

    def __init__(self, locale_code: str) -> None:
        require_babel("LocaleDecimal")
        locale_class = get_locale_class()
        unknown_locale_error = get_unknown_locale_error_class()
        try:
            locale = locale_class.parse(locale_code.replace("-", "_"))
        except (unknown_locale_error, ValueError) as err:
            raise PatternError(ErrorTemplate.locale_unknown(locale_code)) from err
        self._locale: Locale = locale
        self.locale_code = locale_code
        logger.debug("LocaleDecimal bound to locale %s", locale)

    def scan_from(self, text: str) -> tuple[Decimal, int]:
        number, consumed = match_prefix(_LOCALE_NUMBER_RE, text, "expected a localized number")
        parse_decimal = get_parse_decimal_func()
        try:
            value = parse_decimal(number, locale=self._locale)
        except get_number_format_error_class() as err:
            raise ScanError.other(err) from err
        return (value, consumed)

    def __repr__(self) -> str:
        return f"LocaleDecimal({self.locale_code!r})"
