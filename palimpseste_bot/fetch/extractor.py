"""
Wikisource HTML to plain-text reduction.

Extraction runs in a fixed order, after unknown entity references are
dropped from the raw HTML:
1. Narrow to the primary content region (paginated output, then poem,
   then parser output, else the whole document)
2. Remove elements matched by DOM_RULES (scripts, footnote markers,
   navigation and header chrome)
3. Flatten to text, then apply TEXT_RULES (editor artifacts, stray tags)
4. Collapse blank-line runs and trim
5. Drop a leading run of metadata-like lines

Both rule tables are plain data so they can be tested and extended per
language without touching the extraction code.
"""

from __future__ import annotations

from dataclasses import dataclass
from html.entities import html5
import re

from bs4 import BeautifulSoup, NavigableString, Tag


# Content containers, in priority order
REGION_SELECTORS = (".prp-pages-output", ".poem", ".mw-parser-output")

BLOCK_TAGS = (
    "p", "div", "li", "dd", "dt", "blockquote", "tr", "table",
    "h1", "h2", "h3", "h4", "h5", "h6", "center", "pre",
)

MAX_METADATA_SCAN = 15
METADATA_LONG_LINE = 40

_ENTITY_RE = re.compile(r"&([A-Za-z][A-Za-z0-9]{1,31});")


@dataclass(frozen=True)
class DomRule:
    """Remove every element whose tag name or class attribute matches.

    Attributes:
        name: Rule label, used in tests and debugging
        tags: Exact tag names to remove
        class_fragments: Substrings matched against the element's class attribute
    """

    name: str
    tags: tuple[str, ...] = ()
    class_fragments: tuple[str, ...] = ()

    def matches(self, tag: Tag) -> bool:
        if tag.name in self.tags:
            return True
        if not self.class_fragments:
            return False
        classes = tag.get("class") or []
        if isinstance(classes, str):
            classes = [classes]
        joined = " ".join(classes).lower()
        return any(fragment in joined for fragment in self.class_fragments)


@dataclass(frozen=True)
class TextRule:
    """Regex substitution applied to flattened text."""

    name: str
    pattern: re.Pattern[str]
    replacement: str = ""

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


DOM_RULES: tuple[DomRule, ...] = (
    DomRule("scripts", tags=("script", "style", "noscript", "link", "meta")),
    DomRule("footnote-markers", tags=("sup", "sub")),
    DomRule("references", class_fragments=("reference", "mw-cite-backlink")),
    DomRule("edit-links", class_fragments=("mw-editsection",)),
    DomRule("navigation", class_fragments=("navbox", "navigation", "ws-noexport", "noprint", "printfooter")),
    DomRule("info-boxes", class_fragments=("infobox", "metadata", "ambox")),
    DomRule("table-of-contents", class_fragments=("toc", "sommaire")),
    DomRule("category-links", class_fragments=("catlinks",)),
    DomRule("header-templates", class_fragments=("headertemplate", "ws-header", "header_", "entete", "en-tete")),
    DomRule("banners", class_fragments=("homonymie", "disambig", "bandeau", "portail", "portal")),
)

TEXT_RULES: tuple[TextRule, ...] = (
    TextRule(
        "edit-markers",
        re.compile(
            r"\[\s*(?:modifier|edit|bearbeiten|modifica|editar)(?:\s+[^\]]{0,30})?\s*\]",
            re.IGNORECASE,
        ),
    ),
    TextRule(
        "edit-phrases",
        re.compile(
            r"(?:modifier le wikicode|edit wikitext|edit source|quelltext bearbeiten|"
            r"modifica wikitesto|editar código)",
            re.IGNORECASE,
        ),
    ),
    TextRule("footnote-brackets", re.compile(r"\[(?:\d{1,3}|note \d{1,3}|[a-z])\]", re.IGNORECASE)),
    # Decoded "&lt;b&gt;" would otherwise parse as a tag on a second pass.
    TextRule("stray-tags", re.compile(r"</?[A-Za-z][^<>\n]{0,60}>")),
    # Entity-shaped text decoded from "&amp;name;"; a bare "&" is left alone.
    TextRule("entity-remnants", re.compile(r"&[A-Za-z][A-Za-z0-9]{1,31};")),
    TextRule("non-breaking-spaces", re.compile("[\u00a0\u2009\u202f]"), " "),
    TextRule("trailing-spaces", re.compile(r"[ \t]+\n"), "\n"),
    TextRule("blank-runs", re.compile(r"\n{3,}"), "\n\n"),
)

# Leading lines matching these are editorial chrome, not text.
METADATA_SIGNATURES: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"^(?:sommaire|table des matières|tables? of contents|contents|inhalt|indice|índice)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(?:texte établi par|texte entier|édition|source|text from|edition|publié|paru|"
        r"extrait de|tome|vol\.|volume|herausgegeben|quelle)\b",
        re.IGNORECASE,
    ),
    re.compile(r"[◄►←→⟵⟶]"),
    re.compile(r"^(?:précédent|suivant|previous|next|chapitre précédent|chapitre suivant|zurück|weiter)\b", re.IGNORECASE),
    re.compile(r"^(?:catégorie|category|kategorie|categoria|categoría)\b", re.IGNORECASE),
    re.compile(r"^(?:voir aussi|see also|siehe auch|vedi anche|véase también)\b", re.IGNORECASE),
    re.compile(
        r"^(?:note\b|notes\b|avertissement|notice|cette œuvre|this work|licence|license|"
        r"domaine public|public domain)",
        re.IGNORECASE,
    ),
)

_PARENTHETICAL_RE = re.compile(r"^[(\[].*[)\]]$")


def extract_text(html: str) -> str:
    """Reduce rendered Wikisource HTML to plain narrative text.

    Args:
        html: Rendered HTML of a page (or text already produced by this function)

    Returns:
        Plain text with no markup, at most one blank line between blocks and
        leading metadata lines removed. Running it on its own output returns
        the same string.
    """
    soup = BeautifulSoup(drop_unknown_entities(html or ""), "html.parser")
    region = select_region(soup)
    apply_dom_rules(region)
    text = _flatten(region)
    for rule in TEXT_RULES:
        text = rule.apply(text)
    text = text.strip()
    return strip_leading_metadata(text)


def drop_unknown_entities(html: str) -> str:
    """Remove named entity references that are not HTML5 entities.

    Runs on raw HTML, so text decoded from a known entity such as "&amp;"
    is never touched.
    """
    return _ENTITY_RE.sub(_keep_known_entity, html)


def _keep_known_entity(match: re.Match[str]) -> str:
    return match.group(0) if match.group(1) + ";" in html5 else ""


def select_region(soup: BeautifulSoup) -> Tag:
    for selector in REGION_SELECTORS:
        region = soup.select_one(selector)
        if region is not None:
            return region
    return soup


def apply_dom_rules(region: Tag, rules: tuple[DomRule, ...] = DOM_RULES) -> None:
    for rule in rules:
        for tag in region.find_all(rule.matches):
            # A matched ancestor may already have taken this element with it.
            if tag.decomposed:
                continue
            tag.decompose()


def _flatten(region: Tag) -> str:
    for br in region.find_all("br"):
        following = br.next_sibling
        if isinstance(following, NavigableString) and following.startswith("\n"):
            br.replace_with("")
        else:
            br.replace_with("\n")
    for block in region.find_all(BLOCK_TAGS):
        block.append("\n\n")
    return region.get_text()


def is_metadata_line(line: str) -> bool:
    stripped = line.strip()
    if len(stripped) < 3:
        return True
    if _PARENTHETICAL_RE.match(stripped):
        return True
    if len(stripped) > METADATA_LONG_LINE:
        # Long lines only count when they open with a signature.
        return any(signature.match(stripped) for signature in METADATA_SIGNATURES)
    return any(signature.search(stripped) for signature in METADATA_SIGNATURES)


def strip_leading_metadata(text: str) -> str:
    """Drop the leading run of metadata lines within the first 15 lines.

    Dropping stops at the first line that is not metadata: a line longer
    than 40 characters without a signature always stops the scan, and so
    does a short plain line such as a poem title.
    """
    lines = text.split("\n")
    dropped = 0
    for line in lines[:MAX_METADATA_SCAN]:
        if not is_metadata_line(line):
            break
        dropped += 1
    if not dropped:
        return text
    return "\n".join(lines[dropped:]).strip()
