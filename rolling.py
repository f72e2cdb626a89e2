"""Rolling-caption resolution — drops lines a rolling caption window re-displays."""

from __future__ import annotations

from typing import Iterable, Sequence


def resolve_rolling(cue_lines: Iterable[Sequence[str]]) -> list[str]:
    """Return, per cue, the text it newly contributes to the transcript.

    *cue_lines* holds each cue's cleaned lines in source order. A line is
    emitted only the first time its exact text is seen; later repeats are
    dropped. Partially overlapping lines differ as strings and are both kept.
    A cue whose lines were all seen before contributes ``""``.
    """
    seen: dict[str, None] = {}
    contributions: list[str] = []
    for lines in cue_lines:
        fresh = []
        for line in lines:
            if line and line not in seen:
                seen[line] = None
                fresh.append(line)
        contributions.append(" ".join(fresh))
    return contributions
