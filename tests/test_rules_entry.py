"""Tests for the convenience entry points: scan, try_scan, let_scan, readln."""

from __future__ import annotations

import io
import logging

import pytest

from scanrules.diagnostics import PatternError, ScanError
from scanrules.enums import ScanErrorKind
from scanrules.rules import (
    Captures,
    Rule,
    capture,
    let_scan,
    readln,
    remainder,
    scan,
    try_readln,
    try_scan,
)
from scanrules.scanner.misc import Word
from scanrules.syntax import IgnoreAsciiCase, ScanPolicy


class _BrokenStream(io.StringIO):
    """Stream whose reads always fail."""

    def readline(self, size: int | None = -1, /) -> str:  # noqa: ARG002
        msg = "device not ready"
        raise OSError(msg)


_MOVE_RULES = (
    Rule("move", capture(int, "n"), "north", action=lambda n: (0, n)),
    Rule("move", capture(int, "n"), "east", action=lambda n: (n, 0)),
)


class TestScan:
    """scan and try_scan."""

    def test_scan(self) -> None:
        """The first matching rule's value is returned."""
        assert scan("move 3 east", *_MOVE_RULES) == (3, 0)

    def test_scan_shorthand(self) -> None:
        """Tuples stand for rules."""
        result = scan("point 1 2", ("point", capture(int, "x"), capture(int, "y")))

        assert result == {"x": 1, "y": 2}

    def test_scan_policy(self) -> None:
        """A policy can be passed through."""
        policy = ScanPolicy().with_compare(IgnoreAsciiCase())

        assert scan("MOVE 1 NORTH", *_MOVE_RULES, policy=policy) == (0, 1)

    def test_scan_failure(self) -> None:
        """The furthest error propagates."""
        with pytest.raises(ScanError) as exc_info:
            scan("move 3 up", *_MOVE_RULES)

        assert exc_info.value.offset == 7

    def test_try_scan_success(self) -> None:
        """Success is (value, None)."""
        assert try_scan("move 2 north", *_MOVE_RULES) == ((0, 2), None)

    def test_try_scan_failure(self) -> None:
        """Failure is (None, error)."""
        value, err = try_scan("fly 2", *_MOVE_RULES)

        assert value is None
        assert err is not None
        assert err.kind == ScanErrorKind.LITERAL_MISMATCH

    def test_try_scan_raises_pattern_errors(self) -> None:
        """Malformed rules are not returned as values."""
        with pytest.raises(PatternError):
            try_scan("x")


class TestLetScan:
    """let_scan returns the captures of a single rule."""

    def test_let_scan(self) -> None:
        """Terms are given directly."""
        caps = let_scan("width: 80", "width", ":", capture(int, "width"))

        assert isinstance(caps, Captures)
        assert caps["width"] == 80

    def test_let_scan_failure(self) -> None:
        """Failures raise ScanError."""
        with pytest.raises(ScanError):
            let_scan("height: 80", "width", ":", capture(int, "width"))


class TestReadln:
    """readln reads one line and scans it."""

    def test_reads_one_line(self) -> None:
        """Only the first line is consumed from the stream."""
        stream = io.StringIO("move 1 north\nmove 2 east\n")

        assert readln(*_MOVE_RULES, stream=stream) == (0, 1)
        assert readln(*_MOVE_RULES, stream=stream) == (2, 0)

    def test_strips_crlf(self) -> None:
        """CRLF terminators are removed, not scanned."""
        stream = io.StringIO("name: Ada\r\n")

        result = readln(Rule("name", ":", remainder("name")), stream=stream)

        assert result["name"] == " Ada"  # type: ignore[index]

    def test_last_line_without_terminator(self) -> None:
        """A final unterminated line is scanned as is."""
        stream = io.StringIO("42")

        assert readln(Rule(capture(int, "n"), action=lambda n: n), stream=stream) == 42

    def test_eof_is_io_error(self, caplog: pytest.LogCaptureFixture) -> None:
        """An exhausted stream raises an IO error wrapping EOFError."""
        with (
            caplog.at_level(logging.DEBUG, logger="scanrules.rules.entry"),
            pytest.raises(ScanError) as exc_info,
        ):
            readln(Rule(Word), stream=io.StringIO(""))

        assert exc_info.value.kind == ScanErrorKind.IO
        assert isinstance(exc_info.value.cause, EOFError)
        assert "readln: stream exhausted" in caplog.text

    def test_read_failure_is_io_error(self) -> None:
        """OSError from the stream becomes an IO error."""
        with pytest.raises(ScanError) as exc_info:
            readln(Rule(Word), stream=_BrokenStream())

        assert exc_info.value.kind == ScanErrorKind.IO
        assert isinstance(exc_info.value.cause, OSError)

    def test_undecodable_line_is_io_error(self) -> None:
        """Bytes the stream cannot decode become an IO error."""
        stream = io.TextIOWrapper(io.BytesIO(b"\xff\n"), encoding="utf-8")

        with pytest.raises(ScanError) as exc_info:
            readln(Rule(Word), stream=stream)

        assert exc_info.value.kind == ScanErrorKind.IO
        assert isinstance(exc_info.value.cause, UnicodeDecodeError)

    def test_try_readln_undecodable_line(self) -> None:
        """try_readln reports decoding failures instead of raising."""
        stream = io.TextIOWrapper(io.BytesIO(b"\xff\n"), encoding="utf-8")

        value, err = try_readln(Rule(Word), stream=stream)

        assert value is None
        assert err is not None
        assert err.kind == ScanErrorKind.IO

    def test_defaults_to_stdin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without a stream, sys.stdin is read."""
        monkeypatch.setattr("sys.stdin", io.StringIO("7\n"))

        assert readln(Rule(capture(int, "n"), action=lambda n: n * 6)) == 42

    def test_try_readln(self) -> None:
        """Non-raising variant."""
        stream = io.StringIO("move 1 north\nbogus\n")

        assert try_readln(*_MOVE_RULES, stream=stream) == ((0, 1), None)
        value, err = try_readln(*_MOVE_RULES, stream=stream)
        assert value is None
        assert err is not None
        assert err.kind == ScanErrorKind.LITERAL_MISMATCH
