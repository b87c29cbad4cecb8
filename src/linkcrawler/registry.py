"""
Broken links collected during a crawl, grouped by the page that links to them.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from linkcrawler.classify import LinkKind


@dataclass(frozen=True, slots=True)
class BrokenLink:
    """A link whose status check returned 400 or above."""
    url: str
    status: int
    kind: LinkKind
    error: Optional[str] = None


class BrokenLinkRegistry:
    """
    Append-only mapping of source page -> broken links found on it.

    Workers append concurrently; snapshot() is meant for reading once the
    crawl has finished.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_page: Dict[str, List[BrokenLink]] = {}

    def record(self, from_page: str, link: BrokenLink) -> None:
        with self._lock:
            self._by_page.setdefault(from_page, []).append(link)

    def snapshot(self) -> Dict[str, List[BrokenLink]]:
        with self._lock:
            return {page: list(links) for page, links in self._by_page.items()}

    @property
    def page_count(self) -> int:
        with self._lock:
            return len(self._by_page)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(links) for links in self._by_page.values())
