"""
Per-task crawl logic: claim, status-check, and for live internal HTML pages,
fetch, parse and feed discovered links back to the crawler.
"""
from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable, Dict, Optional
from urllib.parse import urlparse

import requests
from bs4 import ParserRejectedMarkup

from linkcrawler.classify import LinkClassifier, LinkKind
from linkcrawler.extract import PageLinks
from linkcrawler.fetcher import Fetcher
from linkcrawler.registry import BrokenLink, BrokenLinkRegistry
from linkcrawler.status import ProbeFailed, ProbeResult, StatusChecker

if TYPE_CHECKING:
    from linkcrawler.core import ClaimSet

# Anchors with these schemes are not web pages
SKIP_SCHEMES: frozenset[str] = frozenset(("mailto", "tel"))


def is_crawlable_anchor(url: str) -> bool:
    """Check that an anchor URL is not a mailto:/tel: link."""
    try:
        scheme = urlparse(url).scheme.lower()
    except ValueError:
        return True
    return scheme not in SKIP_SCHEMES


class PageWorker:
    """Process one CrawlTask at a time; shared by all pool threads."""

    def __init__(
        self,
        classifier: LinkClassifier,
        claims: Dict[LinkKind, "ClaimSet"],
        checker: StatusChecker,
        fetcher: Fetcher,
        registry: BrokenLinkRegistry,
        submit: Callable[[str, str], None],
        parse: Callable[[bytes, str, Optional[str]], PageLinks],
        politeness_delay: float,
        log: Callable[[str], None],
    ) -> None:
        self.classifier = classifier
        self.claims = claims
        self.checker = checker
        self.fetcher = fetcher
        self.registry = registry
        self.submit = submit
        self.parse = parse
        self.politeness_delay = politeness_delay
        self.log = log

    def process(self, url: str, from_page: str) -> None:
        if not url:
            return

        kind = self.classifier.classify(url)
        if not self.claims[kind].claim(url):
            return
        self.log(f"  → {kind.value.lower()} {url}")

        result = self.checker.check(url)
        if result.broken:
            self._record(from_page, url, result, kind)
            return

        if kind is LinkKind.EXTERNAL:
            return

        self._follow(url)

    def _follow(self, url: str) -> None:
        """Fetch a live internal page and hand its links on."""
        # Throttles content fetches only; the status probe above is not delayed
        time.sleep(self.politeness_delay)

        try:
            with self.fetcher.get(url, stream=True) as response:
                content_type = response.headers.get("content-type")
                if not content_type or "text/html" not in content_type.lower():
                    self.log(f"  ⊘ SKIP {url} (not HTML: {content_type})")
                    return
                # requests guesses ISO-8859-1 for bare text/html; let the parser sniff instead
                encoding = response.encoding if "charset=" in content_type.lower() else None
                links = self.parse(response.content, url, encoding)
        except (requests.RequestException, ParserRejectedMarkup) as e:
            self.log(f"  ! ERROR parsing {url}: {e}")
            return

        for href in links.anchors:
            if is_crawlable_anchor(href):
                self.submit(href, url)

        for src in links.images:
            result = self.checker.check(src)
            if result.broken:
                self._record(url, src, result, self.classifier.classify(src))

    def _record(self, from_page: str, url: str, result: ProbeResult, kind: LinkKind) -> None:
        error = result.reason if isinstance(result, ProbeFailed) else None
        if error:
            self.log(f"  ! ERROR could not check {url}: {error}")
        self.log(f"  ✗ {result.code} {url} (on {from_page or '<start>'})")
        self.registry.record(from_page, BrokenLink(url=url, status=result.code, kind=kind, error=error))
