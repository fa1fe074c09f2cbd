"""Scanners: the protocol, the registry and the built-in scanners.

Importing this package registers the default scanners for ``int``,
``float``, ``bool``, ``complex``, ``str``, ``Decimal``, ``Fraction``,
``IPv4Address``, ``IPv6Address`` and ``timedelta``.

Submodules:
    protocol - ScanFromStr, Scanner base classes, registry
    misc     - Word, Hex, Line, QuotedString, KeyValuePair, ...
    lang     - Python built-in value types
    runtime  - exact_width, max_width, min_width, re, until, scan_a, word_a
    std      - collections, IP and socket addresses, ISO 8601 durations
    locale   - LocaleDecimal (requires the ``babel`` extra)

Python 3.13+.
"""

from .escapes import parse_escape_sequence
from .lang import Bool, Char, Complex, DecimalScanner, Float, FractionScanner, Int, Str
from .locale import LocaleDecimal
from .misc import (
    Binary,
    Everything,
    Hex,
    HorSpace,
    Ident,
    Inferred,
    KeyValuePair,
    Line,
    Newline,
    NonSpace,
    Number,
    Octal,
    QuotedString,
    Space,
    Word,
    Wordish,
)
from .protocol import (
    ScanFromStr,
    Scanner,
    ScanSelfFromStr,
    StaticScanner,
    convert,
    is_scanner,
    match_prefix,
    register_scanner,
    registered_types,
    resolve_scanner,
)
from .runtime import (
    ExactWidth,
    MaxWidth,
    MinWidth,
    ScanA,
    ScanRegex,
    Until,
    WordAs,
    exact_width,
    exact_width_a,
    max_width,
    max_width_a,
    min_width,
    min_width_a,
    re,
    re_a,
    re_str,
    scan_a,
    until,
    word_a,
)
from .std import (
    DictOf,
    Ipv4Addr,
    Ipv4Socket,
    Ipv6Addr,
    Ipv6Socket,
    Iso8601Duration,
    ListOf,
    OptionalOf,
    SetOf,
    SocketAddr,
    TupleOf,
)

__all__ = [
    "Binary",
    "Bool",
    "Char",
    "Complex",
    "DecimalScanner",
    "DictOf",
    "Everything",
    "ExactWidth",
    "Float",
    "FractionScanner",
    "Hex",
    "HorSpace",
    "Ident",
    "Inferred",
    "Int",
    "Ipv4Addr",
    "Ipv4Socket",
    "Ipv6Addr",
    "Ipv6Socket",
    "Iso8601Duration",
    "KeyValuePair",
    "Line",
    "ListOf",
    "LocaleDecimal",
    "MaxWidth",
    "MinWidth",
    "Newline",
    "NonSpace",
    "Number",
    "Octal",
    "OptionalOf",
    "QuotedString",
    "ScanA",
    "ScanFromStr",
    "ScanRegex",
    "ScanSelfFromStr",
    "Scanner",
    "SetOf",
    "SocketAddr",
    "Space",
    "StaticScanner",
    "Str",
    "TupleOf",
    "Until",
    "Word",
    "WordAs",
    "Wordish",
    "convert",
    "exact_width",
    "exact_width_a",
    "is_scanner",
    "match_prefix",
    "max_width",
    "max_width_a",
    "min_width",
    "min_width_a",
    "parse_escape_sequence",
    "re",
    "re_a",
    "re_str",
    "register_scanner",
    "registered_types",
    "resolve_scanner",
    "scan_a",
    "until",
    "word_a",
]
