"""
MediaWiki action API client for Wikisource sites.

This module provides the three calls the pipeline needs:
1. list_random: titles from the random-page listing
2. search: titles from a keyword search at a given offset
3. parse_page: rendered HTML, outbound links and display title of one page

Failures never raise: network errors, non-JSON bodies, API error payloads
and missing fields all come back as an empty listing or None, with the
reason recorded in `last_error` and logged at debug level.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..config import FetchConfig
from ..core.types import CandidatePage, PageLink, ParsedPage, SourceSite
from ..utils.logging import log_event


class WikisourceClient:
    """Sequential client for the content API of one or more source sites.

    Args:
        cfg: Fetch configuration (timeout, retries, user agent)
        client: Optional pre-built httpx.AsyncClient, mainly for tests
        logger: Logger for fetch events
    """

    def __init__(
        self,
        cfg: FetchConfig,
        client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg
        self.logger = logger
        self.last_error: str | None = None
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(cfg.timeout_seconds),
            headers={"User-Agent": cfg.user_agent, "Accept": "application/json"},
            follow_redirects=True,
            trust_env=cfg.trust_env,
        )

    async def __aenter__(self) -> "WikisourceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def list_random(self, source: SourceSite, limit: int = 10) -> list[CandidatePage]:
        params = {
            "action": "query",
            "list": "random",
            "rnnamespace": "0",
            "rnlimit": str(limit),
            "format": "json",
        }
        data = await self._get_json(source, params)
        return _candidates(data, "random")

    async def search(
        self,
        source: SourceSite,
        term: str,
        limit: int = 20,
        offset: int = 0,
    ) -> list[CandidatePage]:
        params = {
            "action": "query",
            "list": "search",
            "srsearch": term,
            "srnamespace": "0",
            "srlimit": str(limit),
            "sroffset": str(max(0, offset)),
            "format": "json",
        }
        data = await self._get_json(source, params)
        return _candidates(data, "search")

    async def parse_page(self, source: SourceSite, title: str) -> ParsedPage | None:
        """Fetch the rendered page for a title.

        Returns:
            ParsedPage, or None when the page is missing or the response
            has no HTML body
        """
        if self.cfg.request_delay_seconds > 0:
            await asyncio.sleep(self.cfg.request_delay_seconds)
        params = {
            "action": "parse",
            "page": title,
            "prop": "text|links|displaytitle",
            "redirects": "1",
            "format": "json",
        }
        data = await self._get_json(source, params)
        parse = data.get("parse") if isinstance(data, dict) else None
        if not isinstance(parse, dict):
            self._record_error(source, f"No parse result for {title!r}", data)
            return None

        html = _star(parse.get("text"))
        if not html:
            self._record_error(source, f"Empty HTML for {title!r}", data)
            return None

        links = []
        for item in parse.get("links") or []:
            if not isinstance(item, dict):
                continue
            link_title = _star(item) or item.get("title") or ""
            if link_title:
                links.append(PageLink(title=link_title, namespace=_as_int(item.get("ns"))))

        return ParsedPage(
            title=parse.get("title") or title,
            html=html,
            links=links,
            display_title=parse.get("displaytitle") or parse.get("title") or title,
        )

    async def _get_json(self, source: SourceSite, params: dict[str, str]) -> dict[str, Any]:
        """GET the API endpoint and decode JSON, retrying with linear back-off."""
        self.last_error = None
        retries = max(0, int(self.cfg.retries))
        for attempt in range(retries + 1):
            try:
                resp = await self._client.get(source.api_url, params=params)
                resp.raise_for_status()
                data = resp.json()
                if not isinstance(data, dict):
                    raise ValueError(f"Unexpected JSON payload type: {type(data).__name__}")
                if "error" in data:
                    # API-level errors (missing page, bad title) are not worth retrying.
                    self._record_error(source, f"API error: {data['error']}", None)
                    return {}
                return data
            except (httpx.HTTPError, ValueError) as exc:
                self.last_error = f"{type(exc).__name__}: {exc}"
                log_event(
                    self.logger,
                    "Content API request failed",
                    level=logging.DEBUG,
                    event="api_request_failed",
                    lang=source.lang,
                    action=params.get("action"),
                    attempt=attempt + 1,
                    error=self.last_error,
                )
                if attempt < retries:
                    await asyncio.sleep(0.5 * (attempt + 1))
        return {}

    def _record_error(self, source: SourceSite, message: str, data: Any) -> None:
        if self.last_error is None:
            self.last_error = message
        log_event(
            self.logger,
            message,
            level=logging.DEBUG,
            event="api_empty_result",
            lang=source.lang,
            has_payload=bool(data),
        )


def _candidates(data: dict[str, Any], key: str) -> list[CandidatePage]:
    query = data.get("query") if isinstance(data, dict) else None
    items = query.get(key) if isinstance(query, dict) else None
    if not isinstance(items, list):
        return []
    pages = []
    for item in items:
        if isinstance(item, dict) and item.get("title"):
            pages.append(CandidatePage(title=str(item["title"]), namespace=_as_int(item.get("ns"))))
    return pages


def _star(value: Any) -> str | None:
    # Legacy JSON format wraps content as {"*": "..."}
    if isinstance(value, dict):
        content = value.get("*")
        return content if isinstance(content, str) else None
    if isinstance(value, str):
        return value
    return None


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
