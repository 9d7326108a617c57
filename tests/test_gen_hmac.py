"""Tests for the gen_hmac signing tool."""

from __future__ import annotations

import hashlib
import hmac
import io

import pytest

from signal_relay.tools.gen_hmac import EXIT_FAILURE, main


class _Stdin:
    def __init__(self, data: bytes) -> None:
        self.buffer = io.BytesIO(data)


def test_stdin_matches_independent_hmac(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", _Stdin(b'{"a":1}'))
    assert main(["s3cret"]) == 0

    expected = hmac.new(b"s3cret", b'{"a":1}', hashlib.sha256).hexdigest()
    assert capsys.readouterr().out == expected + "\n"


def test_deterministic(monkeypatch, capsys):
    for _ in range(2):
        monkeypatch.setattr("sys.stdin", _Stdin(b'{"a":1}'))
        main(["k"])
    first, second = capsys.readouterr().out.splitlines()
    assert first == second


def test_payload_file(tmp_path, capsys):
    payload = tmp_path / "payload.json"
    payload.write_bytes(b'{"ticker":"ETHUSDT","action":"buy"}\n')

    assert main(["s3cret", str(payload)]) == 0
    expected = hmac.new(b"s3cret", payload.read_bytes(), hashlib.sha256).hexdigest()
    assert capsys.readouterr().out.strip() == expected


def test_missing_file_is_failure_not_usage(tmp_path, capsys):
    code = main(["s3cret", str(tmp_path / "nope.json")])
    assert code == EXIT_FAILURE
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "gen_hmac:" in captured.err


def test_no_args_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2
    assert exc.value.code != EXIT_FAILURE
    assert "usage" in capsys.readouterr().err.lower()
