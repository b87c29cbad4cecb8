"""
HTTP access shared by the status checker and the page worker.
"""
from __future__ import annotations

import threading
from typing import List, Tuple

import requests

# Browser-like UA; some servers refuse unknown clients outright
DEFAULT_USER_AGENT = "Mozilla/5.0"

# (connect, read) seconds
DEFAULT_TIMEOUT: Tuple[float, float] = (5.0, 5.0)


class Fetcher:
    """
    Issue HEAD/GET requests with a fixed timeout and header policy.

    requests.Session is not safe to share between threads, so each worker
    thread lazily gets its own session. Network failures are raised as
    requests.RequestException; callers decide how to recover.
    """

    def __init__(
        self,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = self.user_agent
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def head(self, url: str) -> requests.Response:
        return self.session.head(url, timeout=self.timeout, allow_redirects=True)

    def get(self, url: str, stream: bool = False) -> requests.Response:
        return self.session.get(url, timeout=self.timeout, allow_redirects=True, stream=stream)

    def close(self) -> None:
        """Close every session opened by any thread."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
