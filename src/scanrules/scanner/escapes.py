"""Escape sequence decoding for quoted strings.

Decodes the escapes produced by ``repr()`` of a Python string, plus the
braced ``\\u{...}`` form used by Rust's debug formatting.

Python 3.13+. Zero external dependencies.
"""

from scanrules.diagnostics import ScanError

__all__ = ["parse_escape_sequence"]

_HEX_DIGITS: frozenset[str] = frozenset("0123456789abcdefABCDEF")

_SIMPLE_ESCAPES: dict[str, str] = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}

# Fixed-width hex escapes: escape letter -> digit count
_HEX_ESCAPES: dict[str, int] = {"x": 2, "u": 4, "U": 8}

# Braced \u{...} escapes allow 1 to 6 hex digits
_MAX_BRACED_DIGITS = 6

_MAX_UNICODE_CODE_POINT = 0x10FFFF
_SURROGATE_RANGE_START = 0xD800
_SURROGATE_RANGE_END = 0xDFFF


def parse_escape_sequence(text: str, pos: int) -> tuple[str, int]:  # noqa: PLR0911
    """Decode the escape sequence whose backslash ends just before ``pos``.

    Supported escape sequences:
        \\" \\' \\\\ \\n \\r \\t \\0 \\a \\b \\f \\v
        \\xNN        (2 hex digits)
        \\uNNNN      (4 hex digits)
        \\UNNNNNNNN  (8 hex digits)
        \\u{N...}    (1 to 6 hex digits)

    Note: PLR0911 (too many returns) is acceptable for grammar helpers.
    Each return represents a successfully decoded alternative.

    Args:
        text: Text containing the escape
        pos: Position AFTER the backslash

    Returns:
        ``(decoded_char, position_after_escape)``

    Raises:
        ScanError: OTHER at ``pos``, wrapping a ValueError, for an unknown or
            malformed escape
    """
    if pos >= len(text):
        raise _escape_error("unterminated escape sequence", pos)

    escape_ch = text[pos]
    if escape_ch in _SIMPLE_ESCAPES:
        return (_SIMPLE_ESCAPES[escape_ch], pos + 1)

    if escape_ch == "u" and text.startswith("{", pos + 1):
        close = text.find("}", pos + 2, pos + 3 + _MAX_BRACED_DIGITS)
        hex_digits = text[pos + 2 : close] if close != -1 else ""
        if not hex_digits or not all(c in _HEX_DIGITS for c in hex_digits):
            raise _escape_error("invalid braced unicode escape", pos)
        return (_code_point(hex_digits, pos), close + 1)

    if escape_ch in _HEX_ESCAPES:
        width = _HEX_ESCAPES[escape_ch]
        hex_digits = text[pos + 1 : pos + 1 + width]
        if len(hex_digits) < width or not all(c in _HEX_DIGITS for c in hex_digits):
            raise _escape_error("invalid hex escape", pos)
        return (_code_point(hex_digits, pos), pos + 1 + width)

    raise _escape_error("unknown escape sequence", pos)


def _code_point(hex_digits: str, pos: int) -> str:
    code_point = int(hex_digits, 16)
    if code_point > _MAX_UNICODE_CODE_POINT:
        raise _escape_error("code point out of range", pos)
    if _SURROGATE_RANGE_START <= code_point <= _SURROGATE_RANGE_END:
        raise _escape_error("surrogate code point", pos)
    return chr(code_point)


def _escape_error(message: str, pos: int) -> ScanError:
    return ScanError.other(ValueError(message), pos)
