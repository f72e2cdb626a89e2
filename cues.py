"""WebVTT cue extraction — splits a raw caption payload into timed cue blocks."""

from __future__ import annotations

import logging
import re
from typing import Iterator, Optional

from models import LineKind, RawCueBlock

logger = logging.getLogger(__name__)

_TIMESTAMP_RE = re.compile(
    r"(?:(?P<h>\d{2,}):)?(?P<m>\d{2}):(?P<s>\d{2})\.(?P<ms>\d{3})"
)
_TIMING_LINE_RE = re.compile(
    r"^\s*(?P<start>\S+)\s*-->\s*(?P<end>\S+)(?:\s+.*)?$"
)
_HEADER_PREFIXES = ("Kind:", "Language:")
_HEADER_KEYWORDS = ("WEBVTT", "NOTE", "STYLE", "REGION")


def parse_timestamp(ts: str) -> Optional[float]:
    """Convert HH:MM:SS.mmm (hours optional) to seconds, or None if malformed."""
    match = _TIMESTAMP_RE.fullmatch(ts.strip())
    if not match:
        return None
    minutes = int(match.group("m"))
    seconds = int(match.group("s"))
    if minutes > 59 or seconds > 59:
        return None
    hours = int(match.group("h") or 0)
    total_ms = ((hours * 60 + minutes) * 60 + seconds) * 1000 + int(match.group("ms"))
    return total_ms / 1000


def parse_timing_line(line: str) -> Optional[tuple[float, float]]:
    """Return (start, end) for a timing line; cue settings after the end time are ignored."""
    match = _TIMING_LINE_RE.match(line)
    if not match:
        return None
    start = parse_timestamp(match.group("start"))
    end = parse_timestamp(match.group("end"))
    if start is None or end is None:
        return None
    return start, end


def _is_header_keyword(stripped: str) -> bool:
    for keyword in _HEADER_KEYWORDS:
        if stripped == keyword:
            return True
        if stripped.startswith(keyword) and stripped[len(keyword)] in (" ", "\t"):
            return True
    return False


def classify_line(line: str) -> LineKind:
    """Tag a raw line with its structural role."""
    stripped = line.strip()
    if not stripped:
        return LineKind.BLANK
    if "-->" in stripped:
        return LineKind.TIMING
    if stripped.startswith(_HEADER_PREFIXES) or _is_header_keyword(stripped):
        return LineKind.HEADER
    return LineKind.TEXT


def _split_blocks(raw: str) -> Iterator[list[tuple[str, LineKind]]]:
    """Yield runs of classified lines separated by one or more blank lines."""
    block: list[tuple[str, LineKind]] = []
    for line in raw.lstrip("\ufeff").splitlines():
        kind = classify_line(line)
        if kind is LineKind.BLANK:
            if block:
                yield block
                block = []
            continue
        block.append((line.rstrip(), kind))
    if block:
        yield block


class _CueCollector:
    """Accumulates text lines for the cue opened by the latest timing line."""

    def __init__(self) -> None:
        self.cues: list[RawCueBlock] = []
        self.seen_timing = False
        self._timing: Optional[tuple[float, float]] = None
        self._lines: list[str] = []
        # True while the most recent timing line was rejected; its text goes with it.
        self._discarding = False

    @property
    def is_open(self) -> bool:
        return self._timing is not None or self._discarding

    @property
    def awaiting_text(self) -> bool:
        """True when a cue is open but none of its text has been read yet."""
        return self._timing is not None and not self._lines

    def open(self, line: str) -> None:
        self.close()
        self.seen_timing = True
        timing = parse_timing_line(line)
        if timing is None:
            logger.debug("Dropping cue with malformed timing line: %r", line)
            self._discarding = True
            return
        start, end = timing
        if end < start:
            logger.debug("Dropping cue ending before it starts: %r", line)
            self._discarding = True
            return
        self._timing = timing

    def add(self, line: str) -> None:
        if self._timing is not None:
            self._lines.append(line)

    def close(self) -> None:
        if self._timing is not None:
            if self._lines:
                start, end = self._timing
                self.cues.append(RawCueBlock(start=start, end=end, lines=tuple(self._lines)))
            else:
                logger.debug("Dropping cue at %.3fs with no text", self._timing[0])
        self._timing = None
        self._lines = []
        self._discarding = False


def _is_metadata_block(first_line: str, first_kind: LineKind, seen_timing: bool) -> bool:
    """True when an untimed block is header or metadata rather than caption text.

    ``Kind:`` and ``Language:`` only count in the preamble; once cues have
    started, only WebVTT's keyword blocks (NOTE, STYLE, REGION) do.
    """
    if first_kind is not LineKind.HEADER:
        return False
    return not seen_timing or _is_header_keyword(first_line.strip())


def extract_cues(raw: str) -> list[RawCueBlock]:
    """Split a raw WebVTT payload into ordered cue blocks.

    Header blocks (WEBVTT, Kind:, Language:, NOTE, STYLE, REGION) are discarded.
    A block with no timing line continues the open cue (auto-caption tracks
    pad cue text with blank lines); with no open cue it is stray text and is
    dropped. A cue whose timing line was followed only by blank lines takes
    the next untimed lines as its text, whatever they start with, including
    lines sitting directly above the following timing line. Otherwise, lines
    preceding a timing line in its block are the cue identifier and are
    ignored.

    Raises:
        TypeError: If *raw* is not a string.
    """
    if not isinstance(raw, str):
        raise TypeError(f"caption payload must be str, not {type(raw).__name__}")

    collector = _CueCollector()
    for block in _split_blocks(raw):
        first_line, first_kind = block[0]
        has_timing = any(kind is LineKind.TIMING for _, kind in block)

        if not has_timing:
            if collector.awaiting_text:
                for line, _ in block:
                    collector.add(line)
            elif _is_metadata_block(first_line, first_kind, collector.seen_timing):
                collector.close()
            elif collector.is_open:
                for line, _ in block:
                    collector.add(line)
            else:
                logger.debug("Dropping stray text block: %r", first_line)
            continue

        in_cue = False
        leading_is_text = collector.awaiting_text
        for line, kind in block:
            if kind is LineKind.TIMING:
                collector.open(line)
                in_cue = True
            elif in_cue or leading_is_text:
                collector.add(line)
    collector.close()
    return collector.cues
