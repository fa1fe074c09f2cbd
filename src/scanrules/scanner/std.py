"""Scanners for standard library types.

Collections read the syntax ``repr()`` uses for them:

    ListOf(item)          [a, b, c]
    TupleOf(*items)       (a, b) and (a,)
    DictOf(key, value)    {k: v, ...}
    SetOf(item)           {a, b} and set()
    OptionalOf(item)      the item, or None

``ListOf(item, length=n)`` reads a fixed number of items.

The collection scanners are grammars, so nesting them ("[[1, 2], [3]]")
is bounded by the grammar nesting guard. Their literals use the default
policy regardless of the policy of the enclosing grammar.

Also registers default scanners for ``ipaddress.IPv4Address``,
``ipaddress.IPv6Address`` and ``datetime.timedelta``. Socket addresses
scan into ``(address, port)`` tuples, the shape the ``socket`` module uses.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import ROUND_HALF_EVEN, Decimal
from ipaddress import IPv4Address, IPv6Address
from typing import TYPE_CHECKING

from scanrules.diagnostics import ScanError
from scanrules.scanner.misc import KeyValuePair
from scanrules.scanner.protocol import (
    Scanner,
    StaticScanner,
    convert,
    match_prefix,
    register_scanner,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from scanrules.rules.engine import Grammar

__all__ = [
    "DictOf",
    "Ipv4Addr",
    "Ipv4Socket",
    "Ipv6Addr",
    "Ipv6Socket",
    "Iso8601Duration",
    "ListOf",
    "OptionalOf",
    "SetOf",
    "SocketAddr",
    "TupleOf",
]


# ============================================================================
# COLLECTIONS
# ============================================================================


class _GrammarScanner[T](Scanner[T]):
    """Scanner backed by a grammar built in ``__init__``."""

    __slots__ = ("_grammar",)

    _grammar: Grammar

    def scan_from(self, text: str) -> tuple[T, int]:
        return self._grammar.scan_from(text)  # type: ignore[return-value]


class ListOf[T](_GrammarScanner[list[T]]):
    """Scans ``[a, b, c]`` into a list. ``[]`` gives an empty list.

    With ``length``, exactly that many items are required and a trailing
    comma is accepted, as in ``[1, 2, 3,]``.

    Example:
        >>> ListOf(int).scan_from("[1, 2, 3] tail")
        ([1, 2, 3], 9)
        >>> ListOf(int, length=2).scan_from("[4, 5,]")
        ([4, 5], 7)
    """

    __slots__ = ("item", "length")

    def __init__(self, item: object, *, length: int | None = None) -> None:
        from scanrules.rules.engine import (  # noqa: PLC0415 - circular
            Grammar,
            Rule,
            exactly,
            optional,
            repeat,
        )
        from scanrules.rules.terms import Capture  # noqa: PLC0415 - circular

        self.item = item
        self.length = length
        if length == 0:
            rule = Rule("[", "]", action=list)
        elif length is not None:
            items = exactly(length, Capture(item), sep=",")
            rule = Rule("[", items, optional(","), "]", action=lambda items: items)
        else:
            items = repeat(Capture(item), sep=",")
            rule = Rule("[", items, "]", action=lambda items: items)
        self._grammar = Grammar(rule)

    def __repr__(self) -> str:
        if self.length is None:
            return f"ListOf({self.item!r})"
        return f"ListOf({self.item!r}, length={self.length})"


class TupleOf(_GrammarScanner[tuple[object, ...]]):
    """Scans a fixed-arity tuple such as ``(1, 'x')``.

    A trailing comma is accepted, and needed by Python itself for one
    element tuples.

    Example:
        >>> from scanrules.scanner.misc import Word
        >>> TupleOf(int, Word).scan_from("(7, seven)")
        ((7, 'seven'), 10)
    """

    __slots__ = ("items",)

    def __init__(self, *items: object) -> None:
        from scanrules.rules.engine import Grammar, Rule, optional  # noqa: PLC0415 - circular
        from scanrules.rules.terms import Capture  # noqa: PLC0415 - circular

        self.items = items
        terms: list[object] = ["("]
        for index, item in enumerate(items):
            if index:
                terms.append(",")
            terms.append(Capture(item))
        if items:
            terms.append(optional(","))
        terms.append(")")
        self._grammar = Grammar(Rule(*terms, action=lambda *values: tuple(values)))

    def __repr__(self) -> str:
        items = ", ".join(repr(item) for item in self.items)
        return f"TupleOf({items})"


class DictOf[K, V](_GrammarScanner[dict[K, V]]):
    """Scans ``{k: v, ...}`` into a dict. Later duplicate keys win.

    Example:
        >>> from scanrules.scanner.misc import Word
        >>> DictOf(Word, int).scan_from("{a: 1, b: 2}")
        ({'a': 1, 'b': 2}, 12)
    """

    __slots__ = ("key", "value")

    def __init__(self, key: object, value: object) -> None:
        from scanrules.rules.engine import Grammar, Rule, repeat  # noqa: PLC0415 - circular
        from scanrules.rules.terms import Capture  # noqa: PLC0415 - circular

        self.key = key
        self.value = value
        self._grammar = Grammar(
            Rule(
                "{",
                repeat(Capture(KeyValuePair(key, value)), sep=",", collect=dict),
                "}",
                action=lambda entries: entries,
            ),
        )

    def __repr__(self) -> str:
        return f"DictOf({self.key!r}, {self.value!r})"


class SetOf[T](_GrammarScanner[set[T]]):
    """Scans ``{a, b}`` into a set. Both ``{}`` and ``set()`` give an empty set."""

    __slots__ = ("item",)

    def __init__(self, item: object) -> None:
        from scanrules.rules.engine import Grammar, Rule, repeat  # noqa: PLC0415 - circular
        from scanrules.rules.terms import Capture  # noqa: PLC0415 - circular

        self.item = item
        self._grammar = Grammar(
            Rule(
                "{",
                repeat(Capture(item), sep=",", collect=set),
                "}",
                action=lambda items: items,
            ),
            Rule("set", "(", ")", action=set),
        )

    def __repr__(self) -> str:
        return f"SetOf({self.item!r})"


class OptionalOf[T](_GrammarScanner[T | None]):
    """Scans ``None`` as None, otherwise the item.

    Example:
        >>> OptionalOf(int).scan_from("None")
        (None, 4)
        >>> OptionalOf(int).scan_from("5")
        (5, 1)
    """

    __slots__ = ("item",)

    def __init__(self, item: object) -> None:
        from scanrules.rules.engine import Grammar, Rule  # noqa: PLC0415 - circular
        from scanrules.rules.terms import Capture  # noqa: PLC0415 - circular

        self.item = item
        self._grammar = Grammar(
            Rule("None", action=lambda: None),
            Rule(Capture(item), action=lambda value: value),
        )

    def __repr__(self) -> str:
        return f"OptionalOf({self.item!r})"


# ============================================================================
# NETWORK ADDRESSES
# ============================================================================

_IPV4_PATTERN = r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}"
_IPV6_PATTERN = r"""
    (?:
        (?: [0-9A-Fa-f]+ (?::[0-9A-Fa-f]+)* )?
        ::
        (?: [0-9A-Fa-f]+ (?::[0-9A-Fa-f]+)* (?:\.\d+\.\d+\.\d+)? )?
    )
    | [0-9A-Fa-f]+ (?::[0-9A-Fa-f]+)+ (?:\.\d+\.\d+\.\d+)?
"""

_IPV4_RE = re.compile(_IPV4_PATTERN)
_IPV6_RE = re.compile(_IPV6_PATTERN, re.VERBOSE)
_IPV4_SOCKET_RE = re.compile(rf"(?P<host>{_IPV4_PATTERN}):(?P<port>\d+)")
_IPV6_SOCKET_RE = re.compile(rf"\[(?P<host>{_IPV6_PATTERN})\]:(?P<port>\d+)", re.VERBOSE)

_MAX_PORT = 65535


class Ipv4Addr(StaticScanner[IPv4Address]):
    """Scans a dotted-quad IPv4 address.

    The shape is checked by a regular expression; out-of-range octets are
    rejected by ``ipaddress`` and reported as OTHER.

    Example:
        >>> Ipv4Addr.scan_from("255.0.0.1.2")
        (IPv4Address('255.0.0.1'), 9)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[IPv4Address, int]:
        address, consumed = match_prefix(_IPV4_RE, text, "expected IPv4 address")
        return (convert(IPv4Address, address), consumed)


class Ipv6Addr(StaticScanner[IPv6Address]):
    """Scans an IPv6 address, including ``::`` compression and an embedded IPv4 tail.

    Example:
        >>> Ipv6Addr.scan_from("1:2::6::8")
        (IPv6Address('1:2::6'), 6)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[IPv6Address, int]:
        address, consumed = match_prefix(_IPV6_RE, text, "expected IPv6 address")
        return (convert(IPv6Address, address), consumed)


def _port(text: str) -> int:
    port = int(text)
    if port > _MAX_PORT:
        msg = f"port out of range: {port}"
        raise ValueError(msg)
    return port


def _match_socket[A](
    pattern: re.Pattern[str],
    address_type: Callable[[str], A],
    text: str,
    description: str,
) -> tuple[tuple[A, int], int]:
    m = pattern.match(text)
    if m is None:
        raise ScanError.syntax(description)
    address = convert(address_type, m["host"], m.start("host"))
    return ((address, convert(_port, m["port"], m.start("port"))), m.end())


class Ipv4Socket(StaticScanner[tuple[IPv4Address, int]]):
    """Scans ``host:port`` with an IPv4 host into ``(address, port)``.

    A port above 65535 is reported as OTHER.

    Example:
        >>> Ipv4Socket.scan_from("127.0.0.1:80/index")
        ((IPv4Address('127.0.0.1'), 80), 12)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[tuple[IPv4Address, int], int]:
        return _match_socket(_IPV4_SOCKET_RE, IPv4Address, text, "expected IPv4 socket address")


class Ipv6Socket(StaticScanner[tuple[IPv6Address, int]]):
    """Scans ``[host]:port`` with an IPv6 host into ``(address, port)``."""

    @classmethod
    def scan_from(cls, text: str) -> tuple[tuple[IPv6Address, int], int]:
        return _match_socket(_IPV6_SOCKET_RE, IPv6Address, text, "expected IPv6 socket address")


class SocketAddr(StaticScanner[tuple[IPv4Address | IPv6Address, int]]):
    """Scans either socket address form: ``1.2.3.4:80`` or ``[::1]:80``."""

    @classmethod
    def scan_from(cls, text: str) -> tuple[tuple[IPv4Address | IPv6Address, int], int]:
        if text.startswith("["):
            return _match_socket(_IPV6_SOCKET_RE, IPv6Address, text, "expected socket address")
        return _match_socket(_IPV4_SOCKET_RE, IPv4Address, text, "expected socket address")


# ============================================================================
# DURATIONS
# ============================================================================

_COMPONENT = r"\d+(?:[.,]\d+)?"
_DURATION_RE = re.compile(
    rf"(?:(?P<hours>{_COMPONENT})H)?"
    rf"(?:(?P<minutes>{_COMPONENT})M)?"
    rf"(?:(?P<seconds>{_COMPONENT})S)?"
)
_SECONDS_PER_UNIT = {"hours": 3600, "minutes": 60, "seconds": 1}
_MICROSECOND = Decimal("0.000001")


class Iso8601Duration(StaticScanner[timedelta]):
    """Scans an ISO 8601 time duration ``PT[nH][nM][nS]`` into a timedelta.

    Each ``n`` is an integer or a fraction using ``.`` or ``,``, and may be
    arbitrarily large (``PT2H76M``). At least one component is required.
    Date components (years, months, weeks, days) are not accepted: they
    have no fixed length in seconds. The result is rounded to
    microseconds, the resolution of ``timedelta``.

    Example:
        >>> Iso8601Duration.scan_from("PT12H34M56.78S")
        (datetime.timedelta(seconds=45296, microseconds=780000), 14)
    """

    @classmethod
    def scan_from(cls, text: str) -> tuple[timedelta, int]:
        if not text.startswith("P"):
            raise ScanError.syntax("expected `P`")
        if not text.startswith("T", 1):
            raise ScanError.syntax("expected `T`", 1)
        m = _DURATION_RE.match(text, 2)
        if m is None or m.end() == 2:
            raise ScanError.syntax("expected duration component", 2)

        try:
            return (_to_timedelta(m), m.end())
        except ArithmeticError as err:
            raise ScanError.other(err) from err


def _to_timedelta(m: re.Match[str]) -> timedelta:
    total = Decimal(0)
    for unit, seconds in _SECONDS_PER_UNIT.items():
        amount = m.group(unit)
        if amount is not None:
            total += Decimal(amount.replace(",", ".")) * seconds
    micros = total.quantize(_MICROSECOND, rounding=ROUND_HALF_EVEN) * 1_000_000
    return timedelta(microseconds=int(micros))


register_scanner(IPv4Address, Ipv4Addr)
register_scanner(IPv6Address, Ipv6Addr)
register_scanner(timedelta, Iso8601Duration)
