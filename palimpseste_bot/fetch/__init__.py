"""
Page fetching and text extraction.

This package handles the content API calls and the reduction of
rendered HTML to plain text.
"""

from .client import WikisourceClient
from .extractor import DOM_RULES, TEXT_RULES, extract_text

__all__ = [
    "WikisourceClient",
    "extract_text",
    "DOM_RULES",
    "TEXT_RULES",
]
