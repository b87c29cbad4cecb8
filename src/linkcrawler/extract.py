"""
Link and image extraction from fetched HTML documents.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional
from urllib.parse import urldefrag, urljoin

from bs4 import BeautifulSoup, SoupStrainer

# Only the tags we read; skipping the rest makes parsing large pages cheaper
LINK_STRAINER = SoupStrainer(["a", "img", "base"])


@dataclass(slots=True)
class PageLinks:
    """Absolute URLs found on one page, in document order, without duplicates."""
    anchors: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)


def _absolute(values: Iterable[str], base: str) -> List[str]:
    seen = {}
    for value in values:
        value = value.strip()
        if not value:
            continue
        url, _ = urldefrag(urljoin(base, value))
        if url:
            seen.setdefault(url, None)
    return list(seen)


def extract_links(content: bytes, base_url: str, encoding: Optional[str] = None) -> PageLinks:
    """
    Parse an HTML document and return its anchor hrefs and image srcs.

    Relative URLs are resolved against base_url, or against the document's
    <base href> when it has one. Fragments are dropped since they never reach
    the server.
    """
    soup = BeautifulSoup(content, "lxml", parse_only=LINK_STRAINER, from_encoding=encoding)

    base = base_url
    base_tag = soup.find("base", href=True)
    if base_tag and base_tag["href"].strip():
        base = urljoin(base_url, base_tag["href"].strip())

    return PageLinks(
        anchors=_absolute((a["href"] for a in soup.find_all("a", href=True)), base),
        images=_absolute((img["src"] for img in soup.find_all("img", src=True)), base),
    )
