"""
Crawl orchestration: the worker pool, deduplication sets, in-flight task
counting and completion detection.
"""
from __future__ import annotations

import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple

from linkcrawler.classify import LinkClassifier, LinkKind
from linkcrawler.extract import PageLinks, extract_links
from linkcrawler.fetcher import DEFAULT_USER_AGENT, Fetcher
from linkcrawler.registry import BrokenLink, BrokenLinkRegistry
from linkcrawler.status import StatusChecker
from linkcrawler.worker import PageWorker


@dataclass(frozen=True, slots=True)
class CrawlTask:
    """A discovered URL and the page it was found on (empty for the seed)."""
    url: str
    from_page: str = ""


@dataclass(slots=True)
class CrawlConfig:
    """Tunables for one crawl run."""
    workers: int = 10
    connect_timeout: float = 5.0
    read_timeout: float = 5.0
    politeness_delay: float = 0.2
    user_agent: str = DEFAULT_USER_AGENT
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.politeness_delay < 0:
            raise ValueError(f"politeness_delay must not be negative, got {self.politeness_delay}")
        if self.connect_timeout <= 0 or self.read_timeout <= 0:
            raise ValueError("timeouts must be positive")


@dataclass(slots=True)
class CrawlSummary:
    """Counters derived from a finished (or interrupted) crawl."""
    start_url: str
    internal_links: int = 0
    external_links: int = 0
    broken_pages: int = 0
    broken_links: int = 0
    elapsed_s: float = 0.0
    failed_tasks: int = 0


class CrawlInterrupted(Exception):
    """The crawl was stopped before all reachable links were processed."""

    def __init__(self, summary: CrawlSummary) -> None:
        super().__init__(f"Crawl of {summary.start_url} interrupted")
        self.summary = summary


class ClaimSet:
    """Grow-only set of URLs with an atomic test-and-insert."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._urls: Set[str] = set()

    def claim(self, url: str) -> bool:
        """Insert url; True means the caller owns it, False that someone already did."""
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)


class InFlightCounter:
    """
    Count of tasks submitted but not yet finished.

    on_zero is called exactly once, when the count drops from 1 to 0. This is
    only a correct completion signal if every task acquires for its children
    before it releases for itself: a parent keeps the count above zero for as
    long as it can still submit work.
    """

    def __init__(self, on_zero: Callable[[], None]) -> None:
        self._lock = threading.Lock()
        self._count = 0
        self._fired = False
        self._on_zero = on_zero

    def acquire(self) -> None:
        with self._lock:
            self._count += 1

    def release(self) -> None:
        with self._lock:
            if self._count <= 0:
                raise RuntimeError("release() called without a matching acquire()")
            self._count -= 1
            fire = self._count == 0 and not self._fired
            if fire:
                self._fired = True
        if fire:
            self._on_zero()

    @property
    def pending(self) -> int:
        with self._lock:
            return self._count


class Crawler:
    """
    Crawl every page reachable from a start URL and collect broken links.

    Each Crawler owns its own deduplication sets, counter and pool, so several
    crawls can run side by side. A Crawler runs once.
    """

    def __init__(
        self,
        base_url: str,
        config: Optional[CrawlConfig] = None,
        fetcher: Optional[Fetcher] = None,
        parser: Callable[[bytes, str, Optional[str]], PageLinks] = extract_links,
    ) -> None:
        self.base_url = base_url
        self.config = config or CrawlConfig()
        self.classifier = LinkClassifier(base_url)

        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or Fetcher(
            timeout=(self.config.connect_timeout, self.config.read_timeout),
            user_agent=self.config.user_agent,
        )
        self.checker = StatusChecker(self.fetcher)
        self.registry = BrokenLinkRegistry()

        self.visited_internal = ClaimSet()
        self.checked_external = ClaimSet()

        self._done = threading.Event()
        self._interrupted = threading.Event()
        self._counter = InFlightCounter(on_zero=self._done.set)
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.workers, thread_name_prefix="linkcrawler"
        )
        self._state_lock = threading.Lock()
        self._started = False
        self._failed_tasks = 0
        self._start_url = base_url
        self._started_at: Optional[float] = None
        self._finished_at: Optional[float] = None

        self.worker = PageWorker(
            classifier=self.classifier,
            claims={
                LinkKind.INTERNAL: self.visited_internal,
                LinkKind.EXTERNAL: self.checked_external,
            },
            checker=self.checker,
            fetcher=self.fetcher,
            registry=self.registry,
            submit=self.submit,
            parse=parser,
            politeness_delay=self.config.politeness_delay,
            log=self.log,
        )

    def log(self, line: str) -> None:
        """Write one progress line to stderr when verbose."""
        if self.config.verbose:
            # One write per line keeps concurrent workers from splicing lines
            sys.stderr.write(line + "\n")

    def start(self, start_url: Optional[str] = None, from_page: str = "") -> CrawlSummary:
        """
        Seed the crawl and block until no task is running or queued.

        Raises CrawlInterrupted if interrupt() is called or the wait is
        interrupted from the keyboard.
        """
        with self._state_lock:
            if self._started:
                raise RuntimeError("Crawler.start() may only be called once")
            self._started = True

        url = (start_url or self.base_url).strip()
        if not url:
            raise ValueError("Invalid start URL: empty")
        self._start_url = url
        self._started_at = time.monotonic()

        try:
            self._dispatch(CrawlTask(url, from_page))
            self._done.wait()
        except KeyboardInterrupt:
            self._interrupted.set()
        finally:
            self._finished_at = time.monotonic()
            interrupted = self._interrupted.is_set()
            self._executor.shutdown(wait=not interrupted, cancel_futures=True)
            if self._owns_fetcher and not interrupted:
                self.fetcher.close()

        if self._interrupted.is_set():
            raise CrawlInterrupted(self.summary())
        return self.summary()

    def interrupt(self) -> None:
        """Stop waiting for outstanding work; start() raises CrawlInterrupted."""
        self._interrupted.set()
        self._done.set()

    def submit(self, url: str, from_page: str) -> None:
        """Queue a discovered URL. Never blocks; blank URLs are ignored."""
        if not url or not url.strip():
            return
        try:
            self._dispatch(CrawlTask(url, from_page))
        except RuntimeError as e:
            # Pool already shut down after an interrupt
            self.log(f"  ! ERROR could not queue {url}: {e}")

    def _dispatch(self, task: CrawlTask) -> None:
        self._counter.acquire()
        try:
            self._executor.submit(self._run, task)
        except BaseException:
            self._counter.release()
            raise

    def _run(self, task: CrawlTask) -> None:
        try:
            self.worker.process(task.url, task.from_page)
        except Exception as e:
            with self._state_lock:
                self._failed_tasks += 1
            self.log(f"  ! ERROR task {task.url} failed: {e!r}")
        finally:
            # Must stay the task's last action: every submit() made by
            # process() above has already acquired, so the count cannot
            # reach zero while this task's children are unaccounted for.
            self._counter.release()

    @property
    def pending(self) -> int:
        return self._counter.pending

    def broken_links(self) -> Dict[str, List[BrokenLink]]:
        return self.registry.snapshot()

    def summary(self) -> CrawlSummary:
        elapsed = 0.0
        if self._started_at is not None:
            end = self._finished_at if self._finished_at is not None else time.monotonic()
            elapsed = end - self._started_at
        with self._state_lock:
            failed = self._failed_tasks
        return CrawlSummary(
            start_url=self._start_url,
            internal_links=len(self.visited_internal),
            external_links=len(self.checked_external),
            broken_pages=self.registry.page_count,
            broken_links=len(self.registry),
            elapsed_s=elapsed,
            failed_tasks=failed,
        )


def crawl(
    start_url: str,
    config: Optional[CrawlConfig] = None,
) -> Tuple[Dict[str, List[BrokenLink]], CrawlSummary]:
    """
    Crawl a site from start_url and report its broken links.

    Args:
        start_url: The URL to start crawling from; its host is the base domain.
        config: Pool size, timeouts, politeness delay and verbosity.

    Returns:
        Tuple of (broken links grouped by source page, crawl summary).
    """
    crawler = Crawler(start_url, config=config)
    summary = crawler.start()
    return crawler.broken_links(), summary
