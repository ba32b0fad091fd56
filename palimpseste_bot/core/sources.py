"""
Source selection: weighted choice of a Wikisource site and a listing strategy.

Default sites and their search terms. Terms are literary forms and registers
that reliably return narrative or verse pages rather than indexes.
"""

from __future__ import annotations

import random
from typing import Sequence

from .types import ListingStrategy, Query, SourceSite


DEFAULT_SOURCES: tuple[SourceSite, ...] = (
    SourceSite(
        lang="fr",
        base_url="https://fr.wikisource.org",
        terms=(
            "sonnet", "ode", "élégie", "ballade", "hymne", "poème en prose",
            "conte", "fable", "légende", "nouvelle", "récit", "tragédie",
            "comédie", "essai", "maxime", "pensée", "lettre", "mémoires",
            "mélancolie", "amour", "nuit", "automne", "rêve", "solitude",
        ),
        weight=50,
    ),
    SourceSite(
        lang="en",
        base_url="https://en.wikisource.org",
        terms=(
            "sonnet", "ode", "elegy", "ballad", "hymn", "tale", "fable",
            "legend", "short story", "essay", "letter", "memoir", "night",
            "love", "autumn", "dream",
        ),
        weight=20,
    ),
    SourceSite(
        lang="de",
        base_url="https://de.wikisource.org",
        terms=("Gedicht", "Sonett", "Ballade", "Märchen", "Fabel", "Erzählung", "Brief", "Nacht"),
        weight=10,
    ),
    SourceSite(
        lang="it",
        base_url="https://it.wikisource.org",
        terms=("sonetto", "canzone", "elegia", "novella", "favola", "lettera", "notte", "amore"),
        weight=10,
    ),
    SourceSite(
        lang="es",
        base_url="https://es.wikisource.org",
        terms=("soneto", "oda", "elegía", "romance", "cuento", "fábula", "carta", "noche"),
        weight=10,
    ),
)


def pick_source(sources: Sequence[SourceSite], rng: random.Random) -> SourceSite:
    """Pick one source with probability proportional to its weight.

    Raises:
        ValueError: If no source is configured or all weights are zero
    """
    if not sources:
        raise ValueError("At least one source site must be configured.")
    weights = [max(0.0, float(source.weight)) for source in sources]
    if sum(weights) <= 0:
        raise ValueError("At least one source site must have a positive weight.")
    return rng.choices(list(sources), weights=weights, k=1)[0]


def pick_term(source: SourceSite, rng: random.Random) -> str | None:
    if not source.terms:
        return None
    return rng.choice(source.terms)


def pick_strategy(rng: random.Random) -> ListingStrategy:
    return ListingStrategy.RANDOM if rng.random() < 0.5 else ListingStrategy.SEARCH


def build_query(sources: Sequence[SourceSite], rng: random.Random) -> Query:
    """Choose the source, term and listing strategy for one attempt.

    The strategy is drawn independently of the term; a source without
    search terms always uses the random listing.
    """
    source = pick_source(sources, rng)
    term = pick_term(source, rng)
    strategy = pick_strategy(rng)
    if term is None:
        strategy = ListingStrategy.RANDOM
    return Query(source=source, strategy=strategy, term=term)
