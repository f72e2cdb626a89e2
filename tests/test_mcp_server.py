"""Tests for the MCP tool functions (called directly, no transport)."""

from __future__ import annotations

import asyncio
import json
import os
from unittest.mock import patch

import pytest

import caption_mcp_server
from cache import TranscriptCache
from caption_mcp_server import vtt_to_segments, vtt_to_text, vtt_to_transcript
from config import ServiceConfig

VTT = (
    "WEBVTT\n"
    "Kind: captions\n"
    "Language: en\n"
    "\n"
    "00:00:00.000 --> 00:00:02.000\n"
    "hello<00:00:00.500><c> world</c>\n"
    "\n"
    "00:00:02.000 --> 00:00:04.000\n"
    "hello<00:00:02.500><c> world</c>\n"
    "&gt;&gt; test<00:00:03.000><c> message</c>\n"
)


@pytest.fixture(autouse=True)
def fresh_state():
    with patch.object(caption_mcp_server, "_cache", TranscriptCache()), \
            patch.object(caption_mcp_server, "_config", ServiceConfig()):
        yield


class TestVttToText:

    def test_returns_transcript(self) -> None:
        data = json.loads(asyncio.run(vtt_to_text(VTT)))
        assert data == {"full_text": "hello world >> test message", "characters": 27}

    def test_empty_payload(self) -> None:
        data = json.loads(asyncio.run(vtt_to_text("")))
        assert data["full_text"] == ""

    def test_non_string_payload(self) -> None:
        data = json.loads(asyncio.run(vtt_to_text(None)))
        assert data["error"] == "InvalidPayload"

    def test_oversized_payload(self) -> None:
        with patch.object(caption_mcp_server, "_config", ServiceConfig(max_payload_bytes=10)):
            data = json.loads(asyncio.run(vtt_to_text(VTT)))
        assert data["error"] == "InvalidPayload"
        assert "limit is 10" in data["message"]

    def test_unexpected_error(self) -> None:
        with patch.object(caption_mcp_server, "parse_transcript", side_effect=RuntimeError("boom")):
            data = json.loads(asyncio.run(vtt_to_text(VTT)))
        assert data == {"error": "UnexpectedError", "message": "boom"}


class TestVttToSegments:

    def test_returns_segments(self) -> None:
        data = json.loads(asyncio.run(vtt_to_segments(VTT)))
        assert data["segment_count"] == 2
        assert data["segments"][0] == {"start": 0.0, "end": 2.0, "text": "hello world"}
        assert data["segments"][1]["text"] == "hello world >> test message"

    def test_invalid_payload(self) -> None:
        data = json.loads(asyncio.run(vtt_to_segments(123)))
        assert data["error"] == "InvalidPayload"


class TestVttToTranscript:

    def test_returns_both(self) -> None:
        data = json.loads(asyncio.run(vtt_to_transcript(VTT)))
        assert data["full_text"] == "hello world >> test message"
        assert len(data["segments"]) == 2
        assert data["cue_count"] == 2

    def test_result_is_cached(self) -> None:
        asyncio.run(vtt_to_transcript(VTT))
        with patch.object(caption_mcp_server, "parse_transcript") as parse:
            data = json.loads(asyncio.run(vtt_to_transcript(VTT)))
        parse.assert_not_called()
        assert data["cue_count"] == 2


class TestMain:

    def test_invalid_env_exits_without_running(self, caplog) -> None:
        env = {"CAPTIONLENS_CACHE_TTL": "soon"}
        with patch.dict(os.environ, env, clear=True), \
                patch.object(caption_mcp_server.mcp, "run") as run:
            with pytest.raises(SystemExit) as excinfo:
                caption_mcp_server.main()
        assert excinfo.value.code == 1
        run.assert_not_called()
        assert "Invalid configuration" in caplog.text

    def test_env_applied_before_running(self) -> None:
        env = {"CAPTIONLENS_MCP_MAX_PAYLOAD_BYTES": "2048"}
        with patch.dict(os.environ, env, clear=True), \
                patch.object(caption_mcp_server.mcp, "run") as run:
            caption_mcp_server.main()
        run.assert_called_once_with()
        assert caption_mcp_server._config.max_payload_bytes == 2048
