import sys
import threading
from pathlib import Path

import pytest
import requests

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from linkcrawler.core import CrawlConfig  # noqa: E402
from linkcrawler.fetcher import Fetcher  # noqa: E402


class FakeResponse:
    def __init__(self, status_code=200, content=b"", content_type="text/html"):
        self.status_code = status_code
        self.content = content
        self.headers = {"content-type": content_type} if content_type else {}
        self.encoding = None

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSite(Fetcher):
    """In-memory website; unknown URLs fail like an unreachable host."""

    def __init__(self):
        super().__init__()
        self.pages = {}
        self.requests = []
        self._lock = threading.Lock()

    def add(self, url, html="", status=200, content_type="text/html"):
        self.pages[url] = (status, html.encode("utf-8"), content_type)

    def _respond(self, method, url):
        with self._lock:
            self.requests.append((method, url))
        if url not in self.pages:
            raise requests.ConnectionError(f"no route to {url}")
        status, body, content_type = self.pages[url]
        return FakeResponse(status, body, content_type)

    def head(self, url):
        return self._respond("HEAD", url)

    def get(self, url, stream=False):
        return self._respond("GET", url)

    def count(self, method, url):
        with self._lock:
            return self.requests.count((method, url))


@pytest.fixture
def site():
    return FakeSite()


@pytest.fixture
def fast_config():
    return CrawlConfig(workers=4, politeness_delay=0)
