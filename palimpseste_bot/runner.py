"""
Main pipeline orchestration for the Palimpseste bot.

This module coordinates one scheduled run:
1. Pick a weighted-random source site, listing strategy and search term
2. List candidate titles and shuffle them
3. For each candidate: title filter, page fetch, text extraction,
   quality gate, excerpt selection and author resolution
4. Format the post under the character budget
5. Publish it (skipped in dry-run mode)

Every candidate and attempt ends in an explicit outcome, Accepted or
Rejected; the loop only decides whether to continue. Any exception raised
inside an attempt is logged and treated as a rejection. Running out of
attempts raises ExhaustedError; a refused post raises PublishError.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field
import logging
from pathlib import Path
import random

from rich.console import Console

from .config import AppConfig, get_publish_credentials, missing_credential_names
from .core.author import resolve_author
from .core.excerpt import select_excerpt
from .core.quality import check_quality
from .core.sources import build_query
from .core.titles import rejection_reason
from .core.types import (
    Accepted,
    Excerpt,
    ListingStrategy,
    Outcome,
    ParsedPage,
    PublishedPost,
    Rejected,
    SourceSite,
)
from .fetch.client import WikisourceClient
from .fetch.extractor import extract_text
from .output.formatter import format_post
from .output.publisher import PublishError, PublishResult, XPublisher
from .utils.logging import log_event, setup_logging, truncate_text


MIN_SUBPAGE_LINKS = 3


@dataclass
class RunStats:
    """Counters collected during one run.

    Attributes:
        attempts: Attempts started
        candidates: Candidate titles evaluated
        pages_fetched: Parse calls made (including sub-pages)
        subpages_tried: Sub-pages of table-of-contents pages evaluated
        rejections: Rejection count per reason
    """

    attempts: int = 0
    candidates: int = 0
    pages_fetched: int = 0
    subpages_tried: int = 0
    rejections: Counter = field(default_factory=Counter)

    def reject(self, reason: str) -> None:
        self.rejections[reason] += 1


class ExhaustedError(Exception):
    """The retry budget was consumed without a publishable excerpt."""

    def __init__(self, stats: RunStats):
        self.stats = stats
        super().__init__(f"No publishable excerpt after {stats.attempts} attempts")


@dataclass
class RunResult:
    """Outcome of a successful run.

    Attributes:
        post: The formatted post
        published: Publish response, or None in dry-run mode
        stats: Run counters
    """

    post: PublishedPost
    published: PublishResult | None
    stats: RunStats


@dataclass
class PageReport:
    """Diagnostics for a single page, as printed by the `excerpt` command."""

    title: str
    source_url: str
    text: str
    quality: str | None
    excerpt: str | None
    author: str | None


def evaluate_page(page: ParsedPage, source: SourceSite, rng: random.Random) -> Outcome:
    """Run extraction, quality gate, excerpt selection and author resolution."""
    text = extract_text(page.html)
    reason = check_quality(text, page)
    if reason is not None:
        return Rejected(reason, f"{len(text)} chars, {len(page.links)} links")

    chosen = select_excerpt(text, rng)
    if chosen is None:
        return Rejected("no_excerpt", "no unit of 60+ characters")

    return Accepted(
        Excerpt(
            text=chosen,
            author=resolve_author(page),
            title=page.title,
            lang=source.lang,
            source_url=source.page_url(page.title),
        )
    )


def subpage_titles(page: ParsedPage) -> list[str]:
    """Main-namespace links that are sub-pages of the same work."""
    base = page.title.split("/", 1)[0]
    seen: set[str] = set()
    titles = []
    for link in page.links:
        if link.namespace != 0 or link.title == page.title:
            continue
        if link.title.startswith(base + "/") and link.title not in seen:
            seen.add(link.title)
            titles.append(link.title)
    return titles


async def evaluate_candidate(
    client: WikisourceClient,
    source: SourceSite,
    title: str,
    cfg: AppConfig,
    rng: random.Random,
    logger: logging.Logger | None,
    stats: RunStats,
    depth: int = 0,
) -> Outcome:
    """Evaluate one title, following sub-pages of a rejected table of contents."""
    title_reason = rejection_reason(title)
    if title_reason is not None:
        return Rejected("title_filtered", title_reason)

    page = await client.parse_page(source, title)
    stats.pages_fetched += 1
    if page is None:
        log_event(
            logger,
            "Page fetch failed",
            level=logging.DEBUG,
            event="page_fetch_failed",
            title=title,
            error=client.last_error,
        )
        return Rejected("fetch_failed", client.last_error or "no page")

    outcome = evaluate_page(page, source, rng)
    if isinstance(outcome, Accepted):
        return outcome

    selection = cfg.selection
    if not selection.follow_subpages or depth >= selection.subpage_depth:
        return outcome
    subpages = subpage_titles(page)
    if len(subpages) < MIN_SUBPAGE_LINKS:
        return outcome

    log_event(
        logger,
        "Following sub-pages",
        level=logging.DEBUG,
        event="subpages_follow",
        title=title,
        count=len(subpages),
        reason=outcome.reason,
    )
    for subtitle in subpages[: selection.max_subpages]:
        stats.subpages_tried += 1
        sub_outcome = await evaluate_candidate(
            client, source, subtitle, cfg, rng, logger, stats, depth + 1
        )
        if isinstance(sub_outcome, Accepted):
            return sub_outcome
        log_event(
            logger,
            "Sub-page rejected",
            level=logging.DEBUG,
            event="subpage_rejected",
            title=subtitle,
            reason=sub_outcome.reason,
            detail=sub_outcome.detail,
        )
    return outcome


async def run_attempt(
    cfg: AppConfig,
    client: WikisourceClient,
    rng: random.Random,
    logger: logging.Logger | None,
    stats: RunStats,
) -> Outcome:
    """One attempt: pick a query, list candidates and try them in shuffled order."""
    query = build_query(cfg.sources, rng)
    source = query.source
    log_event(
        logger,
        "Attempt start",
        event="attempt_start",
        attempt=stats.attempts,
        lang=source.lang,
        strategy=query.strategy.value,
        term=query.term,
    )

    if query.strategy is ListingStrategy.SEARCH and query.term:
        offset = rng.randint(0, max(0, cfg.selection.search_offset_max))
        candidates = await client.search(source, query.term, cfg.selection.search_limit, offset)
    else:
        candidates = await client.list_random(source, cfg.selection.random_limit)

    if not candidates:
        log_event(
            logger,
            "Listing returned no candidates",
            level=logging.DEBUG,
            event="listing_empty",
            lang=source.lang,
            error=client.last_error,
        )
        return Rejected("listing_empty", client.last_error or "")

    candidates = list(candidates)
    rng.shuffle(candidates)
    for candidate in candidates:
        stats.candidates += 1
        try:
            outcome = await evaluate_candidate(
                client, source, candidate.title, cfg, rng, logger, stats
            )
        except Exception as exc:  # noqa: BLE001
            outcome = Rejected("error", f"{type(exc).__name__}: {exc}")

        if isinstance(outcome, Accepted):
            return outcome
        stats.reject(outcome.reason)
        log_event(
            logger,
            "Candidate rejected",
            level=logging.DEBUG,
            event="candidate_rejected",
            title=candidate.title,
            reason=outcome.reason,
            detail=outcome.detail,
        )
    return Rejected("candidates_exhausted", f"{len(candidates)} candidates rejected")


async def find_excerpt(
    cfg: AppConfig,
    client: WikisourceClient,
    rng: random.Random,
    logger: logging.Logger | None,
    stats: RunStats,
) -> Excerpt:
    """Run attempts until one yields an excerpt.

    Raises:
        ExhaustedError: If every attempt in the budget is rejected
    """
    for attempt in range(1, max(1, cfg.selection.max_attempts) + 1):
        stats.attempts = attempt
        try:
            outcome = await run_attempt(cfg, client, rng, logger, stats)
        except Exception as exc:  # noqa: BLE001
            outcome = Rejected("error", f"{type(exc).__name__}: {exc}")

        if isinstance(outcome, Accepted):
            excerpt = outcome.excerpt
            log_event(
                logger,
                "Excerpt selected",
                event="excerpt_selected",
                attempt=attempt,
                title=excerpt.title,
                author=excerpt.author,
                lang=excerpt.lang,
                url=excerpt.source_url,
                length=len(excerpt.text),
            )
            return excerpt

        if outcome.reason in ("listing_empty", "error"):
            stats.reject(outcome.reason)
        log_event(
            logger,
            "Attempt rejected",
            event="attempt_rejected",
            attempt=attempt,
            reason=outcome.reason,
            detail=outcome.detail,
        )
    raise ExhaustedError(stats)


def run_pipeline(
    cfg: AppConfig,
    dry_run: bool = False,
    console: Console | None = None,
    seed: int | None = None,
    log_dir: Path | None = None,
    client: WikisourceClient | None = None,
    publisher: XPublisher | None = None,
) -> RunResult:
    """Run the complete bot pipeline once.

    Args:
        cfg: Application configuration
        dry_run: Format the post but do not publish it
        console: Rich console for the run summary (creates default if None)
        seed: Optional RNG seed for reproducible source and excerpt picks
        log_dir: Directory for the log file when file logging is enabled
        client: Content API client to use instead of building one
        publisher: Publisher to use instead of building one from credentials

    Returns:
        RunResult with the post, the publish response and run statistics

    Raises:
        ValueError: If publishing is requested and credentials are missing
        ExhaustedError: If no attempt produced an excerpt
        PublishError: If the publishing endpoint refused the post
    """
    logger = setup_logging(cfg.logging, log_dir)
    if console is None:
        console = Console()

    if not dry_run and publisher is None:
        credentials = get_publish_credentials(cfg.publish)
        if credentials is None:
            missing = ", ".join(missing_credential_names(cfg.publish))
            raise ValueError(f"Missing publishing credentials in environment: {missing}")
        publisher = XPublisher(cfg.publish, credentials, timeout=cfg.fetch.timeout_seconds)

    rng = random.Random(seed)
    stats = RunStats()
    log_event(logger, "Run start", event="run_start", dry_run=dry_run, seed=seed)

    try:
        return asyncio.run(
            _run_async(cfg, dry_run, rng, logger, stats, client, publisher)
        )
    except ExhaustedError as exc:
        log_event(
            logger,
            "Retry budget exhausted",
            level=logging.ERROR,
            event="run_exhausted",
            attempts=exc.stats.attempts,
            rejections=dict(exc.stats.rejections),
        )
        raise
    except PublishError as exc:
        log_event(
            logger,
            "Publish failed",
            level=logging.ERROR,
            event="publish_failed",
            status_code=exc.status_code,
            body=truncate_text(exc.body),
        )
        raise
    finally:
        _render_run_stats(stats, console)


async def _run_async(
    cfg: AppConfig,
    dry_run: bool,
    rng: random.Random,
    logger: logging.Logger,
    stats: RunStats,
    client: WikisourceClient | None,
    publisher: XPublisher | None,
) -> RunResult:
    if client is None:
        async with WikisourceClient(cfg.fetch, logger=logger) as owned:
            excerpt = await find_excerpt(cfg, owned, rng, logger, stats)
    else:
        excerpt = await find_excerpt(cfg, client, rng, logger, stats)

    post = format_post(excerpt, cfg.post)
    log_event(
        logger,
        "Post formatted",
        event="post_formatted",
        length=len(post),
        text=post.text,
    )
    if dry_run or publisher is None:
        return RunResult(post=post, published=None, stats=stats)

    published = await publisher.publish(post)
    log_event(
        logger,
        "Post published",
        event="post_published",
        post_id=published.post_id,
        url=published.url,
    )
    return RunResult(post=post, published=published, stats=stats)


def inspect_page(
    cfg: AppConfig,
    source: SourceSite,
    title: str,
    seed: int | None = None,
    client: WikisourceClient | None = None,
) -> PageReport | None:
    """Fetch one page and report what each pipeline stage makes of it.

    Returns:
        PageReport, or None when the page could not be fetched
    """
    return asyncio.run(_inspect_async(cfg, source, title, random.Random(seed), client))


async def _inspect_async(
    cfg: AppConfig,
    source: SourceSite,
    title: str,
    rng: random.Random,
    client: WikisourceClient | None,
) -> PageReport | None:
    if client is None:
        async with WikisourceClient(cfg.fetch) as owned:
            page = await owned.parse_page(source, title)
    else:
        page = await client.parse_page(source, title)
    if page is None:
        return None

    text = extract_text(page.html)
    quality = check_quality(text, page)
    return PageReport(
        title=page.title,
        source_url=source.page_url(page.title),
        text=text,
        quality=quality,
        excerpt=select_excerpt(text, rng) if quality is None else None,
        author=resolve_author(page),
    )


def _render_run_stats(stats: RunStats, console: Console) -> None:
    """Display run statistics to the console."""
    rejections = ", ".join(
        f"{reason}={count}" for reason, count in stats.rejections.most_common()
    ) or "none"
    console.print(
        "[bold]Run summary[/bold]: "
        f"attempts={stats.attempts}, candidates={stats.candidates}, "
        f"pages={stats.pages_fetched}, subpages={stats.subpages_tried}, "
        f"rejections: {rejections}"
    )
