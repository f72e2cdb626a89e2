"""Inline markup stripping for WebVTT cue text."""

from __future__ import annotations

import re
from typing import Iterable

_VTT_TIMESTAMP_TAG_RE = re.compile(r"<(?:\d{2,}:)?\d{2}:\d{2}\.\d{3}>")
_STYLE_TAG_RE = re.compile(r"</?[A-Za-z][\w.\-]*(?:[ \t][^<>]*)?>")
_WHITESPACE_RE = re.compile(r"\s+")

# &amp; goes last so "&amp;gt;" decodes once, to the literal text "&gt;".
_ENTITIES: tuple[tuple[str, str], ...] = (
    ("&gt;", ">"),
    ("&lt;", "<"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
    ("&amp;", "&"),
)


def strip_tags(text: str) -> str:
    """Remove word-level timing tags and styling tags, keeping the wrapped text."""
    text = _VTT_TIMESTAMP_TAG_RE.sub("", text)
    return _STYLE_TAG_RE.sub("", text)


def decode_entities(text: str) -> str:
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def clean_line(line: str) -> str:
    """Return *line* with tags removed, entities decoded and whitespace collapsed.

    Decoding runs after tag removal, so an encoded ``&gt;&gt;`` speaker marker
    survives as plain ``>>`` instead of being read as markup.
    """
    return normalize_whitespace(decode_entities(strip_tags(line)))


def clean_lines(lines: Iterable[str]) -> list[str]:
    """Clean each line, dropping lines left empty."""
    cleaned = (clean_line(line) for line in lines)
    return [line for line in cleaned if line]

