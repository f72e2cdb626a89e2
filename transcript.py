"""WebVTT caption parser — converts raw auto-caption text to a transcript and timed segments."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from cues import extract_cues
from dedup import dedupe_segments
from markup import clean_lines
from models import CaptionSegment, ParsedTranscript, RawCueBlock
from rolling import resolve_rolling

logger = logging.getLogger(__name__)

_MULTI_SPACE_RE = re.compile(r" {2,}")


def _clean_cues(cues: Iterable[RawCueBlock]) -> list[tuple[RawCueBlock, list[str]]]:
    """Pair each cue with its cleaned, non-empty lines."""
    return [(cue, clean_lines(cue.lines)) for cue in cues]


def _build_segments(cleaned: Sequence[tuple[RawCueBlock, list[str]]]) -> list[CaptionSegment]:
    segments = [
        CaptionSegment(start=cue.start, end=cue.end, text=" ".join(lines))
        for cue, lines in cleaned
        if lines
    ]
    return dedupe_segments(segments)


def assemble_text(contributions: Iterable[str]) -> str:
    """Join per-cue contributions into one space-separated transcript."""
    text = " ".join(c for c in contributions if c)
    return _MULTI_SPACE_RE.sub(" ", text).strip()


def parse_to_text(raw: str) -> str:
    """Parse a WebVTT payload into one clean, de-duplicated transcript string.

    Each distinct caption line appears once, in source order. Returns ``""``
    when the payload holds no captions.
    """
    cleaned = _clean_cues(extract_cues(raw))
    return assemble_text(resolve_rolling(lines for _, lines in cleaned))


def parse_to_segments(raw: str) -> list[CaptionSegment]:
    """Parse a WebVTT payload into timed segments.

    Multi-line cues are joined with a single space. Segments with identical
    text starting within 0.1s of a kept one are dropped; source order is kept.
    """
    return _build_segments(_clean_cues(extract_cues(raw)))


def parse_transcript(raw: str) -> ParsedTranscript:
    """Parse a payload once and return both the transcript and its segments."""
    cues = extract_cues(raw)
    cleaned = _clean_cues(cues)
    segments = _build_segments(cleaned)
    full_text = assemble_text(resolve_rolling(lines for _, lines in cleaned))
    logger.debug("Parsed %d cues into %d segments", len(cues), len(segments))
    return ParsedTranscript(
        full_text=full_text,
        segments=tuple(segments),
        cue_count=len(cues),
    )

