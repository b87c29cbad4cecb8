"""
Internal/external link classification against the crawl's base domain.
"""
from __future__ import annotations

from enum import Enum
from urllib.parse import urlparse


class LinkKind(str, Enum):
    """Whether a URL belongs to the crawled site."""
    INTERNAL = "Internal"
    EXTERNAL = "External"


def domain_of(url: str) -> str:
    """
    Return the URL's host, lower-cased, without a single leading "www.".

    Returns an empty string when no host can be parsed, so malformed URLs
    never match a real base domain.
    """
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host


class LinkClassifier:
    """Classify URLs as internal or external relative to a fixed base URL."""

    def __init__(self, base_url: str) -> None:
        self.base_domain = domain_of(base_url)
        if not self.base_domain:
            raise ValueError(f"Invalid start URL: {base_url!r}")

    def classify(self, url: str) -> LinkKind:
        if domain_of(url) == self.base_domain:
            return LinkKind.INTERNAL
        return LinkKind.EXTERNAL

    def is_internal(self, url: str) -> bool:
        return self.classify(url) is LinkKind.INTERNAL
