"""Tests for weighted source selection."""

from collections import Counter
import random

import pytest

from palimpseste_bot.core.sources import DEFAULT_SOURCES, build_query, pick_source
from palimpseste_bot.core.types import ListingStrategy, SourceSite


def test_zero_weight_never_picked() -> None:
    sources = [
        SourceSite("fr", "https://fr.wikisource.org", weight=1),
        SourceSite("en", "https://en.wikisource.org", weight=0),
    ]
    rng = random.Random(3)
    assert {pick_source(sources, rng).lang for _ in range(50)} == {"fr"}


def test_weights_bias_selection() -> None:
    rng = random.Random(1)
    counts = Counter(pick_source(DEFAULT_SOURCES, rng).lang for _ in range(1000))
    assert counts["fr"] > counts["en"] > counts["de"] / 2


def test_no_sources_raises() -> None:
    with pytest.raises(ValueError):
        pick_source([], random.Random(0))


def test_source_without_terms_uses_random_listing() -> None:
    sources = [SourceSite("fr", "https://fr.wikisource.org")]
    rng = random.Random(0)
    for _ in range(20):
        query = build_query(sources, rng)
        assert query.strategy is ListingStrategy.RANDOM
        assert query.term is None


def test_search_queries_carry_a_term() -> None:
    rng = random.Random(0)
    queries = [build_query(DEFAULT_SOURCES, rng) for _ in range(50)]
    search = [q for q in queries if q.strategy is ListingStrategy.SEARCH]
    assert search
    assert all(q.term in q.source.terms for q in search)


def test_strategy_drawn_independently_of_term() -> None:
    rng = random.Random(5)
    queries = [build_query(DEFAULT_SOURCES, rng) for _ in range(1000)]
    search = sum(1 for q in queries if q.strategy is ListingStrategy.SEARCH)
    assert 400 < search < 600
    # Random listings still drew a term; it is simply unused.
    assert all(q.term for q in queries)
