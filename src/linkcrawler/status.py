"""
Link status probing: HEAD first, GET when the server rejects HEAD.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import requests

from linkcrawler.fetcher import Fetcher

# Servers that refuse HEAD but answer GET usually say so with one of these
RETRY_WITH_GET: frozenset[int] = frozenset((403, 405))

# Reported status when the probe itself failed (timeout, DNS, reset, bad URL)
PROBE_FAILED_STATUS = 500

BROKEN_THRESHOLD = 400


@dataclass(frozen=True, slots=True)
class Status:
    """The server answered with an HTTP status code."""
    code: int

    @property
    def broken(self) -> bool:
        return self.code >= BROKEN_THRESHOLD


@dataclass(frozen=True, slots=True)
class ProbeFailed:
    """
    No status could be determined.

    Reported to the outside world as a 500, which is indistinguishable from a
    real server error once it reaches the report.
    """
    reason: str

    @property
    def code(self) -> int:
        return PROBE_FAILED_STATUS

    @property
    def broken(self) -> bool:
        return True


ProbeResult = Union[Status, ProbeFailed]


class StatusChecker:
    """Turn a URL into a ProbeResult."""

    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher

    def check(self, url: str) -> ProbeResult:
        try:
            response = self.fetcher.head(url)
            response.close()
            status = response.status_code

            if status in RETRY_WITH_GET:
                with self.fetcher.get(url, stream=True) as response:
                    status = response.status_code

            return Status(status)
        except (requests.RequestException, ValueError) as e:
            return ProbeFailed(str(e) or type(e).__name__)

    def check_status(self, url: str) -> int:
        """Return the plain status code, using the sentinel for failed probes."""
        return self.check(url).code
