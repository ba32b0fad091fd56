"""Tests for OAuth signing and the publisher."""

import asyncio

import httpx
import pytest

from palimpseste_bot.config import PublishConfig, PublishCredentials
from palimpseste_bot.core.types import Excerpt, PublishedPost
from palimpseste_bot.output.publisher import (
    PublishError,
    XPublisher,
    build_oauth_header,
    oauth_signature,
    percent_encode,
)


CREDS = PublishCredentials("key", "secret", "token", "token-secret")
POST = PublishedPost(
    text="Un vers.\n\n— Victor Hugo",
    excerpt=Excerpt("Un vers.", "Victor Hugo", "Titre", "fr", "https://fr.wikisource.org/wiki/Titre"),
)


def test_percent_encode() -> None:
    assert percent_encode("Ladies + Gentlemen") == "Ladies%20%2B%20Gentlemen"
    assert percent_encode("a-b.c_d~e") == "a-b.c_d~e"


def test_signature_reference_vector() -> None:
    params = {
        "include_entities": "true",
        "status": "Hello Ladies + Gentlemen, a signed OAuth request!",
        "oauth_consumer_key": "xvz1evFS4wEEPTGEFPHBog",
        "oauth_nonce": "kYjzVBB8Y0ZFabxSWbWovY3uYSQ2pTgmZeNu2VS4cg",
        "oauth_signature_method": "HMAC-SHA1",
        "oauth_timestamp": "1318622958",
        "oauth_token": "370773112-GmHxMAgYyLbNEtIKZeRNFsMKPR9EyMZeS9weJAEb",
        "oauth_version": "1.0",
    }
    signature = oauth_signature(
        "post",
        "https://api.twitter.com/1.1/statuses/update.json",
        params,
        "kAcSOqF21Fu85e7zjz7ZN2U4ZRhfV3WpwPAoE3Z7kBw",
        "LswwdoUaIvS8ltyTt5jkRh4J50vUPVVHtR2YPi5kE",
    )
    assert signature == "hCtSmYh+iHYCEqBWrE7C7hYmtUk="


def test_header_is_deterministic_with_fixed_nonce() -> None:
    first = build_oauth_header("POST", "https://api.twitter.com/2/tweets", CREDS, nonce="abc", timestamp=1700000000)
    second = build_oauth_header("POST", "https://api.twitter.com/2/tweets", CREDS, nonce="abc", timestamp=1700000000)
    assert first == second
    assert first.startswith("OAuth ")
    assert 'oauth_consumer_key="key"' in first
    assert 'oauth_nonce="abc"' in first
    assert "oauth_signature=" in first


def _publish(handler):
    async def _inner():
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        try:
            return await XPublisher(PublishConfig(), CREDS, client=http).publish(POST)
        finally:
            await http.aclose()

    return asyncio.run(_inner())


def test_publish_created() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = request.content.decode("utf-8")
        return httpx.Response(201, json={"data": {"id": "1234", "text": POST.text}})

    result = _publish(handler)
    assert result.post_id == "1234"
    assert result.url.endswith("/1234")
    assert seen["auth"].startswith("OAuth ")
    assert "Victor Hugo" in seen["body"]


def test_publish_rejected_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"detail": "duplicate content"})

    with pytest.raises(PublishError) as excinfo:
        _publish(handler)
    assert excinfo.value.status_code == 403
    assert "duplicate" in excinfo.value.body


def test_publish_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(PublishError) as excinfo:
        _publish(handler)
    assert excinfo.value.status_code is None
