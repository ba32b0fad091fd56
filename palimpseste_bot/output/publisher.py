"""
Publishing to the X (Twitter) v2 API.

Requests are signed with OAuth 1.0a user-context credentials (HMAC-SHA1).
The JSON body is not part of the signature base string, so only the oauth_*
parameters are signed.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
import hashlib
import hmac
import secrets
import time
from urllib.parse import quote

import httpx

from ..config import PublishConfig, PublishCredentials
from ..core.types import PublishedPost


SUCCESS_STATUS = 201


class PublishError(Exception):
    """The publishing endpoint did not accept the post.

    Attributes:
        status_code: HTTP status returned upstream, or None on network failure
        body: Response body (or error text) for diagnostics
    """

    def __init__(self, status_code: int | None, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Publish failed ({status_code}): {body}")


@dataclass
class PublishResult:
    post_id: str
    url: str


def percent_encode(value: str) -> str:
    """RFC 3986 encoding as required by OAuth 1.0a."""
    return quote(str(value), safe="~-._")


def oauth_signature(
    method: str,
    url: str,
    params: dict[str, str],
    consumer_secret: str,
    token_secret: str,
) -> str:
    param_string = "&".join(
        f"{percent_encode(key)}={percent_encode(params[key])}" for key in sorted(params)
    )
    base_string = "&".join(
        [method.upper(), percent_encode(url), percent_encode(param_string)]
    )
    signing_key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"
    digest = hmac.new(signing_key.encode(), base_string.encode(), hashlib.sha1).digest()
    return base64.b64encode(digest).decode()


def build_oauth_header(
    method: str,
    url: str,
    credentials: PublishCredentials,
    nonce: str | None = None,
    timestamp: int | None = None,
) -> str:
    oauth_params = {
        "oauth_consumer_key": credentials.api_key,
        "oauth_nonce": nonce or secrets.token_hex(16),
        "oauth_signature_method": "HMAC-SHA1",
        "oauth_timestamp": str(timestamp if timestamp is not None else int(time.time())),
        "oauth_token": credentials.access_token,
        "oauth_version": "1.0",
    }
    oauth_params["oauth_signature"] = oauth_signature(
        method, url, oauth_params, credentials.api_secret, credentials.access_secret
    )
    header = ", ".join(
        f'{percent_encode(key)}="{percent_encode(oauth_params[key])}"'
        for key in sorted(oauth_params)
    )
    return f"OAuth {header}"


class XPublisher:
    """Posts formatted text to the configured endpoint.

    Args:
        cfg: Publish configuration
        credentials: OAuth 1.0a credentials
        timeout: Request timeout in seconds
        client: Optional pre-built httpx.AsyncClient, mainly for tests
    """

    def __init__(
        self,
        cfg: PublishConfig,
        credentials: PublishCredentials,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.cfg = cfg
        self.credentials = credentials
        self.timeout = timeout
        self._client = client

    async def publish(self, post: PublishedPost) -> PublishResult:
        """Send the post; raise PublishError unless the endpoint answers 201."""
        headers = {
            "Authorization": build_oauth_header("POST", self.cfg.endpoint, self.credentials),
            "Content-Type": "application/json",
        }
        try:
            if self._client is not None:
                resp = await self._client.post(self.cfg.endpoint, json={"text": post.text}, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout)) as client:
                    resp = await client.post(self.cfg.endpoint, json={"text": post.text}, headers=headers)
        except httpx.HTTPError as exc:
            raise PublishError(None, f"{type(exc).__name__}: {exc}") from exc

        if resp.status_code != SUCCESS_STATUS:
            raise PublishError(resp.status_code, resp.text)

        try:
            post_id = str(resp.json()["data"]["id"])
        except (ValueError, KeyError, TypeError) as exc:
            raise PublishError(resp.status_code, f"Unexpected response body: {resp.text}") from exc
        return PublishResult(post_id=post_id, url=f"https://x.com/i/status/{post_id}")
