"""
Best-effort author attribution for a parsed page.

Heuristics run in order and the first match wins:
1. An outbound link titled "Auteur:…" (or its equivalent in another language)
2. An element with an author-related class and short text content
3. An href pointing into the author namespace
4. A "par/by/de <Name>" byline near the top of the HTML
5. The first segment of a sub-page display title ("Work/Chapter")
"""

from __future__ import annotations

import re
from typing import Callable
from urllib.parse import unquote

from bs4 import BeautifulSoup

from .types import ParsedPage


_AUTHOR_PREFIXES = ("Auteur", "Auteure", "Author", "Autor", "Autore", "Autora")
_PREFIX_PATTERN = "|".join(_AUTHOR_PREFIXES)

_LINK_RE = re.compile(rf"^(?:{_PREFIX_PATTERN})\s*:\s*(.+)$", re.IGNORECASE)
_HREF_RE = re.compile(rf"(?:/wiki/|[?&]title=)(?:{_PREFIX_PATTERN}):([^\"'#?&]+)", re.IGNORECASE)
_AUTHOR_CLASS_RE = re.compile(r"author|auteur|autor", re.IGNORECASE)
_NAME_WORD = r"[A-ZÀ-ÖØ-Þ][a-zß-öø-ÿ'’]+(?:-[A-ZÀ-ÖØ-Þ]?[a-zß-öø-ÿ'’]+)*"
_PARTICLE = r"(?:(?:de|du|des|von|van|der|den|di|da|del|della|la|le)\s+|d['’])"
_NAME = rf"(?:{_PARTICLE})?{_NAME_WORD}(?:\s+(?:{_PARTICLE})?{_NAME_WORD})*"
_FULL_NAME = rf"(?:{_PARTICLE})?{_NAME_WORD}(?:\s+(?:{_PARTICLE})?{_NAME_WORD})+"
# "de/von/di" bylines need at least two capitalised name words.
_BYLINE_RE = re.compile(
    rf"(?:^|[\s>])(?:(?:[Bb]y|[Pp]ar|[Pp]or)\s+({_NAME})|(?:de|von|di)\s+({_FULL_NAME}))"
)
_TAG_RE = re.compile(r"<[^>]+>")

BYLINE_SCAN_CHARS = 500
MIN_CLASS_TEXT, MAX_CLASS_TEXT = 2, 50
MIN_BYLINE, MAX_BYLINE = 3, 40


def resolve_author(page: ParsedPage) -> str | None:
    """Return the attributed author of a page, or None if nothing matches."""
    heuristics: tuple[Callable[[ParsedPage], str | None], ...] = (
        _from_links,
        _from_author_class,
        _from_href,
        _from_byline,
        _from_title,
    )
    for heuristic in heuristics:
        name = heuristic(page)
        if name:
            return name
    return None


def _from_links(page: ParsedPage) -> str | None:
    for link in page.links:
        match = _LINK_RE.match(link.title.strip())
        if match:
            return _clean_name(match.group(1))
    return None


def _from_author_class(page: ParsedPage) -> str | None:
    if not page.html:
        return None
    soup = BeautifulSoup(page.html, "html.parser")
    for element in soup.find_all(class_=_AUTHOR_CLASS_RE):
        text = " ".join(element.get_text(" ").split())
        if MIN_CLASS_TEXT <= len(text) <= MAX_CLASS_TEXT:
            return text
    return None


def _from_href(page: ParsedPage) -> str | None:
    match = _HREF_RE.search(page.html or "")
    if match:
        return _clean_name(unquote(match.group(1)))
    return None


def _from_byline(page: ParsedPage) -> str | None:
    head = (page.html or "")[:BYLINE_SCAN_CHARS]
    match = _BYLINE_RE.search(head)
    if not match:
        return None
    name = (match.group(1) or match.group(2)).strip()
    if MIN_BYLINE <= len(name) <= MAX_BYLINE:
        return name
    return None


def _from_title(page: ParsedPage) -> str | None:
    title = _TAG_RE.sub("", page.display_title or "").strip()
    if "/" not in title:
        return None
    first = title.split("/", 1)[0].strip()
    return first or None


def _clean_name(raw: str) -> str:
    return " ".join(raw.replace("_", " ").split())
