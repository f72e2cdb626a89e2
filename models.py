"""Immutable data structures for parsed caption tracks."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass


class LineKind(enum.Enum):
    """Structural role of a single raw line in a WebVTT payload."""

    HEADER = "header"
    TIMING = "timing"
    TEXT = "text"
    BLANK = "blank"


@dataclass(frozen=True)
class RawCueBlock:
    """One cue as read from the payload, before any cleaning."""

    start: float
    end: float
    lines: tuple[str, ...]


@dataclass(frozen=True)
class CaptionSegment:
    """Single caption segment with timing."""

    start: float
    end: float
    text: str

    def to_dict(self) -> dict:
        """Convert to plain dictionary."""
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class ParsedTranscript:
    """Both outputs of one payload: flattened text and timed segments."""

    full_text: str
    segments: tuple[CaptionSegment, ...]
    cue_count: int = 0

    def to_dict(self) -> dict:
        """Convert to plain dictionary."""
        return dataclasses.asdict(self)
