"""
Palimpseste bot - literary excerpts from Wikisource, posted on a schedule.

This package picks a random public-domain page from a weighted set of
Wikisource sites, extracts its readable text, selects a short excerpt,
attributes it and publishes it as a single post.

Main entry point is the CLI via `palimpseste-bot run` command.

Example:
    $ palimpseste-bot run --dry-run
"""

__all__ = ["__version__", "load_config", "run_pipeline", "format_post", "extract_text"]
__version__ = "0.1.0"

from .config import load_config
from .fetch.extractor import extract_text
from .output.formatter import format_post
from .runner import run_pipeline
