"""
Core domain models and pure pipeline stages.

This package holds the data types and the network-free steps of the
excerpt pipeline: source selection, title filtering, quality gating,
excerpt selection and author resolution.
"""

from .types import (
    Accepted,
    CandidatePage,
    Excerpt,
    ListingStrategy,
    PageLink,
    ParsedPage,
    PublishedPost,
    Query,
    Rejected,
    SourceSite,
)
from .sources import DEFAULT_SOURCES, build_query, pick_source
from .titles import is_content_title
from .quality import check_quality, passes_quality_gate
from .excerpt import select_excerpt
from .author import resolve_author

__all__ = [
    "Accepted",
    "CandidatePage",
    "Excerpt",
    "ListingStrategy",
    "PageLink",
    "ParsedPage",
    "PublishedPost",
    "Query",
    "Rejected",
    "SourceSite",
    "DEFAULT_SOURCES",
    "build_query",
    "pick_source",
    "is_content_title",
    "check_quality",
    "passes_quality_gate",
    "select_excerpt",
    "resolve_author",
]
