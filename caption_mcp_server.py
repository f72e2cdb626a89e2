"""CaptionLens MCP Server — WebVTT auto-caption cleanup into transcripts and timed segments."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

from mcp.server.fastmcp import FastMCP

from cache import TranscriptCache
from config import ConfigError, ServiceConfig, load_config
from models import ParsedTranscript
from transcript import parse_transcript
from validators import InvalidPayloadError, validate_payload

logger = logging.getLogger(__name__)

# Replaced from the environment by main().
_config = ServiceConfig()
_cache = TranscriptCache()

mcp = FastMCP("captionlens")


async def _parse(vtt: str) -> ParsedTranscript:
    """Validate, check cache, parse in a worker thread, cache result."""
    raw = validate_payload(vtt, max_bytes=_config.max_payload_bytes)

    cached = _cache.get(raw)
    if cached is not None:
        return cached

    result = await asyncio.to_thread(parse_transcript, raw)
    if not result.segments:
        logger.info("Payload of %d characters held no captions", len(raw))
    _cache.set(raw, result)
    return result


def _error(name: str, exc: Exception) -> str:
    return json.dumps({"error": name, "message": str(exc)})


@mcp.tool()
async def vtt_to_text(vtt: str) -> str:
    """Convert a raw WebVTT caption track into one clean transcript string.

    Word-level timing tags and styling tags are removed, HTML entities are
    decoded, and lines that rolling auto-captions repeat are kept only once.

    Args:
        vtt: The full WebVTT payload, e.g. an auto-generated .vtt file's contents.

    Returns:
        JSON string with full_text and its character count, or error details.
        An empty full_text means the track holds no captions.
    """
    try:
        result = await _parse(vtt)
        data = {
            "full_text": result.full_text,
            "characters": len(result.full_text),
        }
        return json.dumps(data, ensure_ascii=False, indent=2)
    except InvalidPayloadError as exc:
        return _error("InvalidPayload", exc)
    except Exception as exc:
        logger.warning("vtt_to_text failed: %s", exc)
        return _error("UnexpectedError", exc)


@mcp.tool()
async def vtt_to_segments(vtt: str) -> str:
    """Convert a raw WebVTT caption track into timestamped segments.

    Each segment carries start/end in seconds and the cue's cleaned text.
    Cues repeating the same text within 0.1s of an earlier one are dropped.

    Args:
        vtt: The full WebVTT payload.

    Returns:
        JSON string with segment_count and a segments array, or error details.
    """
    try:
        result = await _parse(vtt)
        data = {
            "segment_count": len(result.segments),
            "segments": [seg.to_dict() for seg in result.segments],
        }
        return json.dumps(data, ensure_ascii=False, indent=2)
    except InvalidPayloadError as exc:
        return _error("InvalidPayload", exc)
    except Exception as exc:
        logger.warning("vtt_to_segments failed: %s", exc)
        return _error("UnexpectedError", exc)


@mcp.tool()
async def vtt_to_transcript(vtt: str) -> str:
    """Convert a raw WebVTT caption track into both text and segments.

    Args:
        vtt: The full WebVTT payload.

    Returns:
        JSON string with full_text, segments and cue_count, or error details.
    """
    try:
        result = await _parse(vtt)
        return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    except InvalidPayloadError as exc:
        return _error("InvalidPayload", exc)
    except Exception as exc:
        logger.warning("vtt_to_transcript failed: %s", exc)
        return _error("UnexpectedError", exc)


def main() -> None:
    global _config, _cache
    try:
        config = load_config("MCP")
    except ConfigError as exc:
        logging.basicConfig(format="%(asctime)s %(name)s %(levelname)s %(message)s")
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    _config = config
    _cache = TranscriptCache(
        ttl_seconds=config.cache_ttl_seconds,
        max_entries=config.cache_max_entries,
    )
    mcp.run()


if __name__ == "__main__":
    main()
