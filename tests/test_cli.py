"""
Tests for the command line front end.
"""

import io
import json

import pytest

from greenpass.cli import main
from samples import ANTIGEN_TEST_SAMPLE_PAYLOAD, RECOVERY_SAMPLE_PAYLOAD, VACCINE_SAMPLE_PAYLOAD


class _Stdin:
    def __init__(self, data: bytes):
        self.buffer = io.BytesIO(data)


class TestCli:
    """Test reading, printing and exit codes."""

    def test_file_input(self, tmp_path, capsys):
        path = tmp_path / "qr.txt"
        path.write_text(RECOVERY_SAMPLE_PAYLOAD + "\n")

        assert main([str(path)]) == 0

        out = capsys.readouterr().out
        assert "Issued by: AT" in out
        assert "Recovery attestation:" in out
        assert "Cert ID: URN:UVCI:01:AT:858CC18CFCF5965EF82F60E493349AA5#K" in out
        assert "Valid until: 2021-10-04" in out

    def test_stdin_input(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", _Stdin(ANTIGEN_TEST_SAMPLE_PAYLOAD.encode()))

        assert main(["-"]) == 0

        out = capsys.readouterr().out
        assert "Rapid Antigen Test (device: 1232)" in out

    def test_default_is_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", _Stdin(VACCINE_SAMPLE_PAYLOAD.encode()))

        assert main([]) == 0

        out = capsys.readouterr().out
        assert "Doses administered: 1/2" in out
        assert "EU/1/20/1528 (Comirnaty)" in out

    def test_empty_input_prints_nothing(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", _Stdin(b""))

        assert main(["-"]) == 0

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_malformed_input(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", _Stdin(b"not a certificate"))

        assert main(["-"]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error: missing initial HC string from input" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.txt")]) == 1
        assert "error:" in capsys.readouterr().err

    def test_invalid_utf8(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", _Stdin(b"HC1:\xff\xfe"))

        assert main(["-"]) == 1
        assert "UTF-8" in capsys.readouterr().err

    def test_json_output(self, tmp_path, capsys):
        path = tmp_path / "qr.txt"
        path.write_text(RECOVERY_SAMPLE_PAYLOAD)

        assert main(["--json", str(path)]) == 0

        doc = json.loads(capsys.readouterr().out)
        assert doc["issuer"] == "AT"
        assert doc["created"] == "2021-07-02T21:24:42+00:00"
        assert doc["signature"]["kid_hex"] == "d919375fc1e7b6b2"
        entry = doc["passes"][0]["entries"][0]
        assert entry["type"] == "recovery"
        assert entry["diagnosed"] == "2021-02-20"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "greenpass" in capsys.readouterr().out
