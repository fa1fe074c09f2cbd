"""End-to-end tests: a small command language built from rules and scanners."""

from __future__ import annotations

import io
from datetime import timedelta
from ipaddress import IPv4Address

import pytest

import scanrules
from scanrules import (
    Grammar,
    Rule,
    ScanError,
    ScanErrorKind,
    capture,
    optional,
    repeat,
    try_readln,
)
from scanrules.scanner.misc import Ident, QuotedString, Word
from scanrules.scanner.runtime import until
from scanrules.scanner.std import ListOf

COMMANDS = (
    Rule(
        "set",
        capture(Ident, "key"),
        "=",
        capture(int, "value"),
        action=lambda key, value: ("set", key, value),
    ),
    Rule("tags", capture(ListOf(Word), "items"), action=lambda items: ("tags", items)),
    Rule(
        "connect",
        capture(IPv4Address, "host"),
        optional(":", capture(int, "port")),
        action=lambda host, port: ("connect", host, port),
    ),
    Rule("wait", capture(timedelta, "delay"), action=lambda delay: ("wait", delay)),
    Rule("echo", capture(QuotedString, "text"), action=lambda text: ("echo", text)),
)


def _run_script(text: str) -> list[object]:
    """Read commands line by line until the stream runs out."""
    stream = io.StringIO(text)
    results: list[object] = []
    while True:
        value, err = try_readln(*COMMANDS, stream=stream)
        if err is not None:
            if err.kind == ScanErrorKind.IO:
                return results
            raise err
        results.append(value)


class TestCommandLanguage:
    """Each command form."""

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("set retries = 3", ("set", "retries", 3)),
            ("tags [web, db]", ("tags", ["web", "db"])),
            ("connect 10.0.0.1:8080", ("connect", IPv4Address("10.0.0.1"), 8080)),
            ("connect 10.0.0.1", ("connect", IPv4Address("10.0.0.1"), None)),
            ("wait PT1M30S", ("wait", timedelta(seconds=90))),
            ('echo "hello, world"', ("echo", "hello, world")),
        ],
    )
    def test_commands(self, line: str, expected: object) -> None:
        """Lines scan to command tuples."""
        assert scanrules.scan(line, *COMMANDS) == expected

    def test_bad_value_points_at_value(self) -> None:
        """The error names the value that failed."""
        with pytest.raises(ScanError) as exc_info:
            scanrules.scan("set retries = many", *COMMANDS)

        err = exc_info.value
        assert err.kind == ScanErrorKind.SYNTAX
        assert err.offset == 14
        assert err.format_error("set retries = many") == "1:15: expected an integer"

    def test_bad_address_is_other(self) -> None:
        """Address range errors surface as OTHER with the cause attached."""
        with pytest.raises(ScanError) as exc_info:
            scanrules.scan("connect 300.0.0.1", *COMMANDS)

        assert exc_info.value.kind == ScanErrorKind.OTHER
        assert isinstance(exc_info.value.cause, ValueError)
        assert exc_info.value.offset == 8


class TestScripts:
    """Several commands read from a stream."""

    def test_script(self) -> None:
        """Every line is scanned until end of input."""
        script = "set a = 1\r\ntags []\nwait PT2S\n"

        assert _run_script(script) == [
            ("set", "a", 1),
            ("tags", []),
            ("wait", timedelta(seconds=2)),
        ]

    def test_script_error_stops(self) -> None:
        """A bad line raises its scan error."""
        with pytest.raises(ScanError):
            _run_script("set a = 1\nlaunch rockets\n")


class TestDocuments:
    """Whole documents scanned in one pass."""

    def test_key_value_document(self) -> None:
        """Repeated entries across lines."""
        entry = Grammar(
            Rule(capture(Ident, "key"), "=", capture(until(";", int), "value"), ";"),
        )
        document = Rule(repeat(capture(entry, "entries")))

        caps = document.scan("a = 1;\nb = 2;\n")

        entries = caps["entries"]  # type: ignore[index]
        assert [(e["key"], e["value"]) for e in entries] == [("a", 1), ("b", 2)]

    def test_error_context(self) -> None:
        """Errors in later lines render with line context."""
        entry = Grammar(Rule(capture(Ident, "key"), "=", capture(int, "value")))
        document = Rule(repeat(capture(entry)))
        source = "a = 1\nb = x"

        with pytest.raises(ScanError) as exc_info:
            document.scan(source)

        err = exc_info.value
        assert err.kind == ScanErrorKind.EXPECTED_END
        assert err.format_with_context(source).splitlines() == [
            "2:1: expected end of input",
            "",
            "   1 | a = 1",
            "   2 | b = x",
            "     | ^",
        ]
