"""Quality gate: tell narrative pages apart from indexes, stubs and lists."""

from __future__ import annotations

import re

from .types import ParsedPage


MIN_TEXT_CHARS = 200
MIN_LINES = 2
CHARS_PER_LINK = 15
MAX_LINK_DENSITY = 0.25
SHORT_LINE_AVG = 60
MIN_PUNCTUATED_RATIO = 0.3

_REDIRECT_RE = re.compile(
    r"(?:redirectMsg|redirectText|#REDIRECT|#REDIRECTION|#WEITERLEITUNG|"
    r"plusieurs éditions|multiple editions|versionpage|"
    r"cette page liste|this page lists|diese seite listet|questa pagina elenca|"
    r"homonymie|disambig)",
    re.IGNORECASE,
)

_TERMINAL_PUNCTUATION = (".", "!", "?", ":", ";", "…")
_CLOSING_CHARS = " \t\"'»”’)]"


def check_quality(text: str, page: ParsedPage) -> str | None:
    """Return the rejection reason for extracted text, or None if it passes.

    Reasons, in evaluation order: "too_short", "redirect_or_index",
    "link_dense", "too_few_lines", "list_like".
    """
    if len(text) < MIN_TEXT_CHARS:
        return "too_short"
    if _REDIRECT_RE.search(page.html or ""):
        return "redirect_or_index"
    if link_density(text, page) > MAX_LINK_DENSITY:
        return "link_dense"

    lines = [line.strip() for line in text.split("\n") if line.strip()]
    if len(lines) < MIN_LINES:
        return "too_few_lines"

    avg_line = sum(len(line) for line in lines) / len(lines)
    if avg_line < SHORT_LINE_AVG:
        # Verse ends a fair share of its lines with punctuation; a bare list does not.
        punctuated = sum(1 for line in lines if _ends_with_terminal(line))
        if punctuated / len(lines) < MIN_PUNCTUATED_RATIO:
            return "list_like"
    return None


def passes_quality_gate(text: str, page: ParsedPage) -> bool:
    return check_quality(text, page) is None


def link_density(text: str, page: ParsedPage) -> float:
    """Estimated share of the text taken by link labels."""
    if not text:
        return float("inf") if page.links else 0.0
    return len(page.links) * CHARS_PER_LINK / len(text)


def _ends_with_terminal(line: str) -> bool:
    return line.rstrip(_CLOSING_CHARS).endswith(_TERMINAL_PUNCTUATION)
