"""Tests for the command-line entry point."""

from __future__ import annotations

import io
import json
import os
from unittest.mock import patch

from cli import run

VTT = (
    "WEBVTT\n\n"
    "00:00:01.000 --> 00:00:02.000\n"
    "Same line\n\n"
    "00:00:01.050 --> 00:00:02.000\n"
    "Same line\n\n"
    "00:00:02.000 --> 00:00:03.500\n"
    "it&#39;s<00:00:02.500><c> done</c>\n"
)


class TestRun:

    def test_text_output(self, tmp_path, capsys) -> None:
        path = tmp_path / "captions.en.vtt"
        path.write_text(VTT, encoding="utf-8")
        assert run(str(path), "text") == 0
        assert capsys.readouterr().out == "Same line it's done\n"

    def test_segments_output(self, tmp_path, capsys) -> None:
        path = tmp_path / "captions.en.vtt"
        path.write_text(VTT, encoding="utf-8")
        assert run(str(path), "segments") == 0
        assert capsys.readouterr().out.splitlines() == [
            "[1.000 --> 2.000] Same line",
            "[2.000 --> 3.500] it's done",
        ]

    def test_json_output(self, tmp_path, capsys) -> None:
        path = tmp_path / "captions.en.vtt"
        path.write_text(VTT, encoding="utf-8")
        assert run(str(path), "json") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["full_text"] == "Same line it's done"
        assert data["cue_count"] == 3
        assert len(data["segments"]) == 2

    def test_reads_stdin(self, capsys) -> None:
        with patch("sys.stdin", io.StringIO(VTT)):
            assert run("-", "text") == 0
        assert capsys.readouterr().out == "Same line it's done\n"

    def test_missing_file(self, tmp_path, capsys) -> None:
        assert run(str(tmp_path / "missing.vtt"), "text") == 1
        assert "captionlens:" in capsys.readouterr().err

    def test_payload_over_limit(self, tmp_path, capsys) -> None:
        path = tmp_path / "captions.en.vtt"
        path.write_text(VTT, encoding="utf-8")
        with patch.dict(os.environ, {"CAPTIONLENS_CLI_MAX_PAYLOAD_BYTES": "16"}, clear=True):
            assert run(str(path), "text") == 1
        assert "limit is 16" in capsys.readouterr().err

    def test_bad_config(self, tmp_path, capsys) -> None:
        path = tmp_path / "captions.en.vtt"
        path.write_text(VTT, encoding="utf-8")
        with patch.dict(os.environ, {"CAPTIONLENS_MAX_PAYLOAD_BYTES": "huge"}, clear=True):
            assert run(str(path), "text") == 1
        assert "CAPTIONLENS_MAX_PAYLOAD_BYTES" in capsys.readouterr().err
