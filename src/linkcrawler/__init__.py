"""
Concurrent website crawler that checks every reachable link and reports the
broken ones, grouped by the page that links to them.
"""
from linkcrawler.classify import LinkClassifier, LinkKind, domain_of
from linkcrawler.core import (
    ClaimSet,
    CrawlConfig,
    CrawlInterrupted,
    CrawlSummary,
    CrawlTask,
    Crawler,
    InFlightCounter,
    crawl,
)
from linkcrawler.registry import BrokenLink, BrokenLinkRegistry
from linkcrawler.status import ProbeFailed, Status, StatusChecker

__version__ = "1.0.0"
__all__ = [
    "BrokenLink",
    "BrokenLinkRegistry",
    "ClaimSet",
    "CrawlConfig",
    "CrawlInterrupted",
    "CrawlSummary",
    "CrawlTask",
    "Crawler",
    "InFlightCounter",
    "LinkClassifier",
    "LinkKind",
    "ProbeFailed",
    "Status",
    "StatusChecker",
    "crawl",
    "domain_of",
]
