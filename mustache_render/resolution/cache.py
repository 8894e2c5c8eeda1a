"""Per-run memoization of remote fetches."""

from __future__ import annotations

import asyncio
import logging

from .fetcher import FetchResult, RemoteFetcher

logger = logging.getLogger(__name__)


class RequestCache:
    """Share one download per URL between every caller of a run.

    The task for a URL is stored before the first suspension point, so
    concurrent callers always find it and await the same outcome, failures
    included. Entries are never evicted.
    """

    def __init__(self, fetcher: RemoteFetcher) -> None:
        self._fetcher = fetcher
        self._tasks: dict[str, asyncio.Task[FetchResult]] = {}
        self.calls = 0

    def fetch(self, url: str) -> asyncio.Task[FetchResult]:
        """Return the (possibly already finished) download task for ``url``."""
        task = self._tasks.get(url)
        if task is None:
            logger.info(f"Fetching {url}...")
            task = asyncio.ensure_future(self._fetcher.fetch(url))
            self._tasks[url] = task
            self.calls += 1
        return task
