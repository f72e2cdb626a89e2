"""Time-window deduplication of caption segments."""

from __future__ import annotations

import logging
from typing import Iterable

from models import CaptionSegment

logger = logging.getLogger(__name__)

# Encoder jitter between re-emitted identical cues stays within this window.
DEDUP_WINDOW_SECONDS = 0.1

# Timestamps carry millisecond precision; absorbs float error at the window edge.
_EPSILON = 1e-6


def _within_window(a: float, b: float) -> bool:
    return abs(a - b) <= DEDUP_WINDOW_SECONDS + _EPSILON


def dedupe_segments(segments: Iterable[CaptionSegment]) -> list[CaptionSegment]:
    """Drop later segments duplicating an earlier kept one; keep source order.

    Two segments are duplicates when their text is identical and their starts
    lie within DEDUP_WINDOW_SECONDS. The check runs against every kept segment
    with the same text, not only the previous one. Time ranges are not merged.
    """
    kept: list[CaptionSegment] = []
    starts_by_text: dict[str, list[float]] = {}
    for seg in segments:
        starts = starts_by_text.setdefault(seg.text, [])
        if any(_within_window(seg.start, s) for s in starts):
            logger.debug("Dropping duplicate segment at %.3fs: %r", seg.start, seg.text)
            continue
        starts.append(seg.start)
        kept.append(seg)
    return kept
