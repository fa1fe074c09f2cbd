"""Hypothesis-based round-trip properties for the built-in scanners.

Every scanner reads what the matching Python formatter writes: repr() for
collections, str() for addresses, json.dumps() for quoted strings. A value
formatted and then scanned must come back unchanged, with the whole text
consumed.
"""

from __future__ import annotations

import json
from ipaddress import IPv4Address, IPv6Address

import pytest
from hypothesis import event, given, settings
from hypothesis import strategies as st

from scanrules.scanner.misc import QuotedString
from scanrules.scanner.std import DictOf, Ipv4Addr, Ipv6Addr, ListOf, OptionalOf, TupleOf

pytestmark = pytest.mark.fuzz


def _nested_int_lists(depth: int) -> st.SearchStrategy[list[object]]:
    """Lists of ints nested exactly ``depth`` levels deep."""
    strategy: st.SearchStrategy[object] = st.integers()
    for _ in range(depth):
        strategy = st.lists(strategy, max_size=4)
    return strategy  # type: ignore[return-value]


def _nested_list_scanner(depth: int) -> ListOf[object]:
    scanner: object = int
    for _ in range(depth):
        scanner = ListOf(scanner)
    return scanner  # type: ignore[return-value]


class TestCollectionRoundtrip:
    """repr() output of collections scans back."""

    @given(st.integers(min_value=1, max_value=4).flatmap(
        lambda depth: st.tuples(st.just(depth), _nested_int_lists(depth))
    ))
    @settings(max_examples=200)
    def test_nested_lists(self, case: tuple[int, list[object]]) -> None:
        """Nested lists of ints round-trip at every depth."""
        depth, value = case
        event(f"depth={depth}")
        text = repr(value)

        assert _nested_list_scanner(depth).scan_from(text) == (value, len(text))

    @given(st.dictionaries(st.from_regex(r"[a-z_][a-z0-9_]{0,8}", fullmatch=True), st.integers()))
    def test_dicts_with_identifier_keys(self, value: dict[str, int]) -> None:
        """Dicts of quoted identifiers to ints round-trip."""
        text = repr(value).replace("'", '"')

        assert DictOf(QuotedString, int).scan_from(text) == (value, len(text))

    @given(st.tuples(st.integers(), st.booleans(), st.floats(allow_nan=False)))
    def test_tuples(self, value: tuple[int, bool, float]) -> None:
        """Heterogeneous tuples round-trip."""
        text = repr(value)

        assert TupleOf(int, bool, float).scan_from(text) == (value, len(text))

    @given(st.none() | st.integers())
    def test_optional(self, value: int | None) -> None:
        """None and values round-trip through OptionalOf."""
        text = repr(value)

        assert OptionalOf(int).scan_from(text) == (value, len(text))


class TestAddressRoundtrip:
    """str() output of addresses scans back, followed by anything."""

    @given(st.ip_addresses(v=4), st.sampled_from(["", " ", "/24", ":80", ","]))
    def test_ipv4_with_suffix(self, address: IPv4Address, suffix: str) -> None:
        """The suffix is never consumed."""
        text = str(address)

        assert Ipv4Addr.scan_from(text + suffix) == (address, len(text))

    @given(st.ip_addresses(v=6), st.sampled_from(["", " ", "/64", "]", ","]))
    def test_ipv6_with_suffix(self, address: IPv6Address, suffix: str) -> None:
        """The suffix is never consumed."""
        text = str(address)
        event(f"compressed={'::' in text}")

        assert Ipv6Addr.scan_from(text + suffix) == (address, len(text))


class TestQuotedStringRoundtrip:
    """JSON string literals are valid quoted strings."""

    @given(st.text())
    @settings(max_examples=300)
    def test_json_strings(self, value: str) -> None:
        """json.dumps output decodes to the original text."""
        text = json.dumps(value, ensure_ascii=False)

        assert QuotedString.scan_from(text) == (value, len(text))

    @given(st.text())
    def test_ascii_json_strings(self, value: str) -> None:
        """ASCII-only JSON decodes through \\u escapes; astral text needs surrogate pairs."""
        text = json.dumps(value)
        if any(ord(ch) > 0xFFFF for ch in value):
            event("astral")
            return

        assert QuotedString.scan_from(text) == (value, len(text))
