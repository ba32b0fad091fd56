"""Post formatting under the platform character budget."""

from __future__ import annotations

import re
from urllib.parse import quote

from ..config import PostConfig
from ..core.types import Excerpt, PublishedPost


ELLIPSIS = "…"
DASH = "—"
# Text room the attribution must always leave for the excerpt
MIN_TEXT_ROOM = 20

_TRAILING_PARTIAL_WORD_RE = re.compile(r"\s+\S*$")


def build_suffix(author: str, cfg: PostConfig, include_link: bool = True) -> str:
    """Attribution block appended after the excerpt text."""
    parts = [f"\n\n{DASH} {author}"]
    if include_link and cfg.profile_url_template:
        parts.append("\n" + cfg.profile_url_template.format(author=quote(author, safe="")))
    if cfg.hashtags:
        parts.append("\n" + cfg.hashtags)
    return "".join(parts)


def format_post(excerpt: Excerpt, cfg: PostConfig) -> PublishedPost:
    """Assemble `{text}\\n\\n— {author}{link}{hashtags}` within `cfg.max_length`.

    Only the excerpt text is shortened, at a whitespace boundary with an
    ellipsis. The attribution is kept whole unless it would leave fewer than
    MIN_TEXT_ROOM characters for the text; then the profile link is dropped,
    and after that the author name shortened.
    """
    limit = cfg.max_length
    author = (excerpt.author or "").strip() or cfg.fallback_author
    suffix = _fit_suffix(author, cfg, limit - MIN_TEXT_ROOM)

    text = excerpt.text.strip()
    room = limit - len(suffix)
    if len(text) > room:
        text = _shorten(text, room - len(ELLIPSIS)) + ELLIPSIS

    result = text + suffix
    if len(result) > limit:
        result = result[: limit - len(ELLIPSIS)] + ELLIPSIS
    return PublishedPost(text=result, excerpt=excerpt)


def _fit_suffix(author: str, cfg: PostConfig, budget: int) -> str:
    suffix = build_suffix(author, cfg)
    if len(suffix) <= budget:
        return suffix
    suffix = build_suffix(author, cfg, include_link=False)
    if len(suffix) <= budget:
        return suffix
    overflow = len(suffix) - budget
    keep = max(1, len(author) - overflow - len(ELLIPSIS))
    return build_suffix(author[:keep].rstrip() + ELLIPSIS, cfg, include_link=False)


def _shorten(text: str, room: int) -> str:
    if room <= 0:
        return ""
    cut = text[:room]
    trimmed = _TRAILING_PARTIAL_WORD_RE.sub("", cut)
    # A single unbroken word longer than the room is hard-cut.
    return trimmed if trimmed else cut
