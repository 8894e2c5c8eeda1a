"""Downloading remote data and templates."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ..core.errors import BadStatusError, ConnectionFailedError, EmptyBodyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Raw body of a successful download."""

    url: str
    text: str
    content_type: str = ""


class RemoteFetcher:
    """Fetch resources over HTTP(S) with a shared ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def fetch(self, url: str) -> FetchResult:
        """Download ``url`` and return its body as text.

        Raises:
            ConnectionFailedError: If the request could not be completed
            BadStatusError: If the response status is not 200
            EmptyBodyError: If the body is empty or not text
        """
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as exc:
            raise ConnectionFailedError(
                f"Unable to download {url}: {exc}", url=url
            ) from exc

        if response.status_code != 200:
            raise BadStatusError(response.status_code, url=url)

        try:
            text = response.content.decode(response.encoding or "utf-8")
        except (UnicodeDecodeError, LookupError) as exc:
            raise EmptyBodyError(
                f"Got non-text body while downloading {url}", url=url
            ) from exc

        if text == "":
            raise EmptyBodyError(f"Got empty body while downloading {url}", url=url)

        logger.debug(f"Downloaded {len(text)} character(s) from {url}")
        return FetchResult(
            url=url,
            text=text,
            content_type=response.headers.get("content-type", ""),
        )
