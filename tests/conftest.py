from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from mustache_render.core.settings import get_settings
from mustache_render.resolution.cache import RequestCache
from mustache_render.resolution.fetcher import RemoteFetcher


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    for name in ("DIRECTORY", "EXTENSION", "LOG_LEVEL"):
        monkeypatch.delenv(f"MUSTACHE_RENDER_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def client():
    async with httpx.AsyncClient() as http_client:
        yield http_client


@pytest.fixture
async def cache(client: httpx.AsyncClient) -> RequestCache:
    return RequestCache(RemoteFetcher(client))


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A small project: data in three formats, a template and a partial."""
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "hello.json").write_text('{"name": "World"}', encoding="utf-8")
    (tmp_path / "data" / "hello.yaml").write_text("name: World\n", encoding="utf-8")
    (tmp_path / "data" / "hello.yml").write_text("name: World\n", encoding="utf-8")
    (tmp_path / "data" / "hello.py").write_text('data = {"name": "World"}\n', encoding="utf-8")

    (tmp_path / "templates").mkdir()
    (tmp_path / "templates" / "hello.mustache").write_text(
        "Hello {{name}}!", encoding="utf-8"
    )
    (tmp_path / "templates" / "with_partial.mustache").write_text(
        "<p>{{> greeting}}</p>", encoding="utf-8"
    )

    (tmp_path / "partials").mkdir()
    (tmp_path / "partials" / "greeting.mustache").write_text(
        "Hello {{name}}!", encoding="utf-8"
    )
    (tmp_path / "partials" / "greeting.tpl").write_text(
        "Howdy {{name}}!", encoding="utf-8"
    )
    return tmp_path
