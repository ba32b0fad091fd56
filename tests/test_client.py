"""Tests for the content API client using httpx.MockTransport."""

import asyncio

import httpx

from palimpseste_bot.config import FetchConfig
from palimpseste_bot.core.types import SourceSite
from palimpseste_bot.fetch.client import WikisourceClient


SOURCE = SourceSite("fr", "https://fr.wikisource.org")
FAST = FetchConfig(retries=0, request_delay_seconds=0)


def _run(handler, call, cfg: FetchConfig = FAST):
    async def _inner():
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with WikisourceClient(cfg, client=http) as client:
            result = await call(client)
            error = client.last_error
        await http.aclose()
        return result, error

    return asyncio.run(_inner())


def test_random_listing() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        seen["path"] = request.url.path
        return httpx.Response(
            200,
            json={"query": {"random": [{"id": 1, "ns": 0, "title": "Le Lac"}, {"ns": 0, "title": "Spleen"}]}},
        )

    pages, error = _run(handler, lambda c: c.list_random(SOURCE, limit=2))
    assert [p.title for p in pages] == ["Le Lac", "Spleen"]
    assert error is None
    assert seen["path"] == "/w/api.php"
    assert seen["list"] == "random"
    assert seen["rnnamespace"] == "0"
    assert seen["rnlimit"] == "2"


def test_search_passes_offset() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json={"query": {"search": [{"ns": 0, "title": "Sonnet I"}]}})

    pages, _ = _run(handler, lambda c: c.search(SOURCE, "sonnet", limit=5, offset=40))
    assert [p.title for p in pages] == ["Sonnet I"]
    assert seen["srsearch"] == "sonnet"
    assert seen["sroffset"] == "40"
    assert seen["srnamespace"] == "0"


def test_parse_page_legacy_format() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["action"] == "parse"
        assert request.url.params["redirects"] == "1"
        return httpx.Response(
            200,
            json={
                "parse": {
                    "title": "Le Lac",
                    "displaytitle": "Le Lac",
                    "text": {"*": "<p>Ainsi, toujours poussés vers de nouveaux rivages,</p>"},
                    "links": [
                        {"ns": 102, "exists": "", "*": "Auteur:Alphonse de Lamartine"},
                        {"ns": 0, "*": "Méditations poétiques"},
                    ],
                }
            },
        )

    page, _ = _run(handler, lambda c: c.parse_page(SOURCE, "Le Lac"))
    assert page is not None
    assert page.title == "Le Lac"
    assert page.html.startswith("<p>Ainsi")
    assert [(link.title, link.namespace) for link in page.links] == [
        ("Auteur:Alphonse de Lamartine", 102),
        ("Méditations poétiques", 0),
    ]


def test_api_error_payload_returns_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": {"code": "missingtitle", "info": "The page does not exist."}})

    page, error = _run(handler, lambda c: c.parse_page(SOURCE, "Inexistant"))
    assert page is None
    assert "missingtitle" in error


def test_http_failure_is_retried_then_empty() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503, text="busy")

    pages, error = _run(handler, lambda c: c.list_random(SOURCE), FetchConfig(retries=1, request_delay_seconds=0))
    assert pages == []
    assert len(calls) == 2
    assert "HTTPStatusError" in error


def test_non_json_body_is_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    pages, error = _run(handler, lambda c: c.search(SOURCE, "ode"))
    assert pages == []
    assert error
