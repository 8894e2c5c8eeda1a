"""Lifetime of the HTTP client and request cache shared by one run."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import httpx

from ..core.models import RenderOptions
from ..resolution.cache import RequestCache
from ..resolution.fetcher import RemoteFetcher
from .engine import Renderer


@asynccontextmanager
async def render_session(
    options: RenderOptions,
    base_dir: Path | None = None,
    client: httpx.AsyncClient | None = None,
) -> AsyncIterator[Renderer]:
    """Yield a ``Renderer`` backed by a fresh request cache.

    A client passed in is left open; one created here is closed on exit.
    """
    owns_client = client is None
    http_client = client or httpx.AsyncClient(follow_redirects=True)
    try:
        cache = RequestCache(RemoteFetcher(http_client))
        yield Renderer(options, cache, base_dir)
    finally:
        if owns_client:
            await http_client.aclose()
