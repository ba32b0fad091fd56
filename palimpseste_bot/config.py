"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: Content API request settings
- sources: Weighted list of Wikisource sites and their search terms
- SelectionConfig: Retry budget and listing sizes
- PostConfig: Post length budget, hashtags and profile link
- PublishConfig: Publishing endpoint and credential variable names
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml

from .core.sources import DEFAULT_SOURCES
from .core.types import SourceSite


@dataclass
class FetchConfig:
    """Configuration for content API requests.

    Attributes:
        timeout_seconds: Timeout applied to every content API and publish request
        retries: Number of retry attempts for a failed request
        request_delay_seconds: Pause before each page parse call
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 15.0
    retries: int = 1
    request_delay_seconds: float = 0.5
    trust_env: bool = True
    user_agent: str = "PalimpsesteBot/1.0 (https://palimpseste.vercel.app)"


@dataclass
class SelectionConfig:
    """Configuration for the attempt loop.

    Attributes:
        max_attempts: Attempts (source pick + listing) before giving up
        random_limit: Number of titles requested from the random listing
        search_limit: Number of titles requested per search page
        search_offset_max: Upper bound of the random search pagination offset
        follow_subpages: Whether to try sub-pages of rejected table-of-contents pages
        max_subpages: Sub-pages tried per table-of-contents page
        subpage_depth: Maximum nesting of table-of-contents pages followed
    """

    max_attempts: int = 8
    random_limit: int = 10
    search_limit: int = 20
    search_offset_max: int = 100
    follow_subpages: bool = True
    max_subpages: int = 3
    subpage_depth: int = 2


@dataclass
class PostConfig:
    """Configuration for post formatting.

    Attributes:
        max_length: Hard character budget of the post
        hashtags: Hashtag line appended after the attribution
        profile_url_template: Author profile link; "{author}" is URL-encoded
        fallback_author: Attribution used when no author was resolved
    """

    max_length: int = 280
    hashtags: str = "#littérature #palimpseste"
    profile_url_template: str = "https://palimpseste.vercel.app/#/author/{author}"
    fallback_author: str = "Anonyme"


@dataclass
class PublishConfig:
    """Configuration for the publishing endpoint.

    Attributes:
        endpoint: Post creation URL
        api_key_env: Environment variable holding the consumer key
        api_secret_env: Environment variable holding the consumer secret
        access_token_env: Environment variable holding the access token
        access_secret_env: Environment variable holding the access token secret
    """

    endpoint: str = "https://api.twitter.com/2/tweets"
    api_key_env: str = "X_API_KEY"
    api_secret_env: str = "X_API_SECRET"
    access_token_env: str = "X_ACCESS_TOKEN"
    access_secret_env: str = "X_ACCESS_TOKEN_SECRET"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "bot.jsonl"


@dataclass
class PublishCredentials:
    """OAuth 1.0a user-context credentials."""

    api_key: str
    api_secret: str
    access_token: str
    access_secret: str


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    sources: list[SourceSite] = field(default_factory=lambda: list(DEFAULT_SOURCES))
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    post: PostConfig = field(default_factory=PostConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return _fromdict(_asdict(DEFAULT_CONFIG))

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(DEFAULT_CONFIG, raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Mapping sections are merged key by key; "sources" replaces the default
    site list entirely.
    """
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "fetch": {
            "timeout_seconds": cfg.fetch.timeout_seconds,
            "retries": cfg.fetch.retries,
            "request_delay_seconds": cfg.fetch.request_delay_seconds,
            "trust_env": cfg.fetch.trust_env,
            "user_agent": cfg.fetch.user_agent,
        },
        "sources": [
            {
                "lang": source.lang,
                "base_url": source.base_url,
                "terms": list(source.terms),
                "weight": source.weight,
            }
            for source in cfg.sources
        ],
        "selection": {
            "max_attempts": cfg.selection.max_attempts,
            "random_limit": cfg.selection.random_limit,
            "search_limit": cfg.selection.search_limit,
            "search_offset_max": cfg.selection.search_offset_max,
            "follow_subpages": cfg.selection.follow_subpages,
            "max_subpages": cfg.selection.max_subpages,
            "subpage_depth": cfg.selection.subpage_depth,
        },
        "post": {
            "max_length": cfg.post.max_length,
            "hashtags": cfg.post.hashtags,
            "profile_url_template": cfg.post.profile_url_template,
            "fallback_author": cfg.post.fallback_author,
        },
        "publish": {
            "endpoint": cfg.publish.endpoint,
            "api_key_env": cfg.publish.api_key_env,
            "api_secret_env": cfg.publish.api_secret_env,
            "access_token_env": cfg.publish.access_token_env,
            "access_secret_env": cfg.publish.access_secret_env,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        fetch=FetchConfig(**data["fetch"]),
        sources=[_source_fromdict(item) for item in data.get("sources") or []],
        selection=SelectionConfig(**data["selection"]),
        post=PostConfig(**data["post"]),
        publish=PublishConfig(**data["publish"]),
        logging=LoggingConfig(**data["logging"]),
    )


def _source_fromdict(item: dict[str, Any]) -> SourceSite:
    lang = str(item["lang"])
    base_url = item.get("base_url") or f"https://{lang}.wikisource.org"
    return SourceSite(
        lang=lang,
        base_url=str(base_url).rstrip("/"),
        terms=tuple(str(term) for term in item.get("terms") or ()),
        weight=float(item.get("weight", 1.0)),
    )


def get_publish_credentials(cfg: PublishConfig) -> PublishCredentials | None:
    """Read publishing credentials from the environment.

    Returns None when any of the four variables is missing or empty.
    """
    values = [
        os.getenv(cfg.api_key_env),
        os.getenv(cfg.api_secret_env),
        os.getenv(cfg.access_token_env),
        os.getenv(cfg.access_secret_env),
    ]
    if not all(values):
        return None
    return PublishCredentials(*values)


def missing_credential_names(cfg: PublishConfig) -> list[str]:
    names = [cfg.api_key_env, cfg.api_secret_env, cfg.access_token_env, cfg.access_secret_env]
    return [name for name in names if not os.getenv(name)]
