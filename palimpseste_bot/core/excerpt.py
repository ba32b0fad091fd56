"""Excerpt selection: pick one paragraph-sized unit under a length budget."""

from __future__ import annotations

import random
import re


MIN_UNIT_CHARS = 20
MIN_FALLBACK_CHARS = 60
MAX_EXCERPT_CHARS = 500
PREFERRED_RANGE = (100, 450)
ACCEPTABLE_RANGE = (80, 500)
MIN_SENTENCE_CUT = 200
MIN_WHITESPACE_CUT = 300
ELLIPSIS = "…"

_UNIT_SPLIT_RE = re.compile(r"\n[ \t]*\n")
_SENTENCE_END_RE = re.compile(r"[.!?…]")


def split_units(text: str) -> list[str]:
    """Split text on blank lines, dropping units shorter than 20 characters."""
    units = (unit.strip() for unit in _UNIT_SPLIT_RE.split(text or ""))
    return [unit for unit in units if len(unit) >= MIN_UNIT_CHARS]


def select_excerpt(text: str, rng: random.Random | None = None) -> str | None:
    """Choose an excerpt from cleaned text.

    Units of 100-450 characters are preferred, then 80-500; within a bucket
    the choice is uniformly random. Otherwise the first unit of at least 60
    characters is used, truncated to 500 characters when longer.

    Returns:
        The excerpt, or None when no unit reaches 60 characters
    """
    rng = rng or random.Random()
    units = split_units(text)

    for low, high in (PREFERRED_RANGE, ACCEPTABLE_RANGE):
        bucket = [unit for unit in units if low <= len(unit) <= high]
        if bucket:
            return rng.choice(bucket)

    for unit in units:
        if len(unit) >= MIN_FALLBACK_CHARS:
            return truncate_unit(unit)
    return None


def truncate_unit(unit: str, limit: int = MAX_EXCERPT_CHARS) -> str:
    """Cut a unit to at most `limit` characters without splitting a word.

    Prefers the last sentence end past offset 200; then the last whitespace
    past offset 300, keeping the whitespace before the ellipsis; then a hard
    cut. The ellipsis counts toward the limit.
    """
    if len(unit) <= limit:
        return unit

    window = unit[:limit]
    sentence_ends = [m.end() for m in _SENTENCE_END_RE.finditer(window)]
    if sentence_ends and sentence_ends[-1] > MIN_SENTENCE_CUT:
        return window[: sentence_ends[-1]]

    room = window[: limit - len(ELLIPSIS)]
    last_space = max(room.rfind(" "), room.rfind("\n"), room.rfind("\t"))
    if last_space > MIN_WHITESPACE_CUT:
        return room[: last_space + 1] + ELLIPSIS
    return room + ELLIPSIS
