"""
Core data types for the Palimpseste bot.

This module defines the data structures passed between pipeline stages:
- SourceSite: A configured Wikisource origin (static for the process lifetime)
- CandidatePage: A title proposed by a listing call
- ParsedPage: Rendered HTML, outbound links and display title of one page
- Excerpt: The selected span of text with its attribution
- PublishedPost: The final formatted post handed to the publisher
- Accepted / Rejected: Outcome of evaluating one candidate
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import quote


@dataclass(frozen=True)
class SourceSite:
    """A language-specific public-domain text repository with a query API.

    Attributes:
        lang: Language tag (e.g., "fr", "en")
        base_url: Site root without trailing slash (e.g., "https://fr.wikisource.org")
        terms: Keyword search terms used by the search listing strategy
        weight: Relative selection weight; higher weights are picked more often
    """

    lang: str
    base_url: str
    terms: tuple[str, ...] = ()
    weight: float = 1.0

    @property
    def api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/w/api.php"

    def page_url(self, title: str) -> str:
        """Return the public URL of a page on this site."""
        slug = quote(title.replace(" ", "_"), safe="/:")
        return f"{self.base_url.rstrip('/')}/wiki/{slug}"


class ListingStrategy(str, Enum):
    """How candidate titles are listed for an attempt."""

    RANDOM = "random"
    SEARCH = "search"


@dataclass(frozen=True)
class Query:
    """One attempt's choice of source, listing strategy and search term."""

    source: SourceSite
    strategy: ListingStrategy
    term: str | None = None


@dataclass(frozen=True)
class CandidatePage:
    """A page title proposed by a listing call, not yet fetched."""

    title: str
    namespace: int = 0


@dataclass(frozen=True)
class PageLink:
    """An outbound wiki link of a parsed page.

    Attributes:
        title: Link target as displayed by the API (e.g., "Auteur:Victor Hugo")
        namespace: Numeric MediaWiki namespace of the target
    """

    title: str
    namespace: int = 0


@dataclass
class ParsedPage:
    """Rendered page content returned by the parse API.

    Attributes:
        title: Canonical page title that was requested
        html: Rendered HTML body of the page
        links: Outbound wiki links
        display_title: Title as displayed (may contain markup in the API response)
    """

    title: str
    html: str
    links: list[PageLink] = field(default_factory=list)
    display_title: str = ""


@dataclass(frozen=True)
class Excerpt:
    """The selected text considered for publication.

    Attributes:
        text: Excerpt text, 60 to 500 characters
        author: Attributed author, or None when no heuristic matched
        title: Title of the page the excerpt comes from
        lang: Language tag of the source site
        source_url: Public URL of the page
    """

    text: str
    author: str | None
    title: str
    lang: str
    source_url: str


@dataclass(frozen=True)
class PublishedPost:
    """Final post text within the platform budget."""

    text: str
    excerpt: Excerpt

    def __len__(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class Accepted:
    """A candidate survived every gate."""

    excerpt: Excerpt


@dataclass(frozen=True)
class Rejected:
    """A candidate (or a whole attempt) was abandoned.

    Attributes:
        reason: Short machine-readable rejection reason (see REJECTION_REASONS)
        detail: Optional human-readable context for logs
    """

    reason: str
    detail: str = ""


REJECTION_REASONS = (
    "title_filtered",
    "fetch_failed",
    "too_short",
    "redirect_or_index",
    "link_dense",
    "too_few_lines",
    "list_like",
    "no_excerpt",
    "listing_empty",
    "candidates_exhausted",
    "error",
)

Outcome = Accepted | Rejected
