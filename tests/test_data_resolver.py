from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx
import pytest
import respx

from mustache_render.core.errors import (
    BadStatusError,
    DataParseError,
    InvalidInputError,
    UnrecognizedFormatError,
    UnsupportedDataFileError,
)
from mustache_render.resolution.cache import RequestCache
from mustache_render.resolution.data import DataResolver, is_object


@pytest.mark.parametrize(
    "value", [{"name": "World"}, [1, 2, 3], 7, 1.5, True, ""]
)
async def test_inline_data_is_returned_unchanged(cache: RequestCache, value: object) -> None:
    assert await DataResolver(cache).resolve(value) is value


async def test_null_data_fails(cache: RequestCache) -> None:
    with pytest.raises(InvalidInputError):
        await DataResolver(cache).resolve(None)


@pytest.mark.parametrize("name", ["hello.json", "hello.yaml", "hello.yml", "hello.py"])
async def test_local_files(site: Path, cache: RequestCache, name: str) -> None:
    resolver = DataResolver(cache, site)

    assert await resolver.resolve(f"data/{name}") == {"name": "World"}


async def test_unsupported_local_suffix(site: Path, cache: RequestCache) -> None:
    (site / "data" / "hello.txt").write_text("name=World", encoding="utf-8")

    with pytest.raises(UnsupportedDataFileError):
        await DataResolver(cache, site).resolve("data/hello.txt")


async def test_missing_file_propagates_os_error(site: Path, cache: RequestCache) -> None:
    with pytest.raises(FileNotFoundError):
        await DataResolver(cache, site).resolve("data/missing.json")


async def test_invalid_json_file(site: Path, cache: RequestCache) -> None:
    (site / "data" / "broken.json").write_text("{name: ", encoding="utf-8")

    with pytest.raises(DataParseError, match="broken.json"):
        await DataResolver(cache, site).resolve("data/broken.json")


async def test_module_exporting_empty_mapping_warns(
    tmp_path: Path, cache: RequestCache, caplog: pytest.LogCaptureFixture
) -> None:
    (tmp_path / "empty.py").write_text("data = {}\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        assert await DataResolver(cache, tmp_path).resolve("empty.py") == {}

    assert "does not export anything" in caplog.text


async def test_module_without_data_warns(
    tmp_path: Path, cache: RequestCache, caplog: pytest.LogCaptureFixture
) -> None:
    (tmp_path / "nothing.py").write_text("VALUE = 1\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        assert await DataResolver(cache, tmp_path).resolve("nothing.py") == {}

    assert "does not export anything" in caplog.text


async def test_module_exporting_scalar_warns(
    tmp_path: Path, cache: RequestCache, caplog: pytest.LogCaptureFixture
) -> None:
    (tmp_path / "title.py").write_text('data = "Hello"\n', encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        assert await DataResolver(cache, tmp_path).resolve("title.py") == "Hello"

    assert "exported a non-object" in caplog.text


async def test_module_exporting_list_is_an_object(
    tmp_path: Path, cache: RequestCache, caplog: pytest.LogCaptureFixture
) -> None:
    (tmp_path / "listing.py").write_text('data = ["a", "b"]\n', encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        assert await DataResolver(cache, tmp_path).resolve("listing.py") == ["a", "b"]

    assert "non-object" not in caplog.text
    assert "does not export" not in caplog.text


async def test_remote_json_by_suffix(
    respx_mock: respx.MockRouter, cache: RequestCache
) -> None:
    respx_mock.get("https://data.test/hello.json").mock(
        return_value=httpx.Response(200, text='{"name": "World"}')
    )

    data = await DataResolver(cache).resolve("https://data.test/hello.json")

    assert data == {"name": "World"}


async def test_remote_yaml_by_content_type(
    respx_mock: respx.MockRouter, cache: RequestCache
) -> None:
    respx_mock.get("https://data.test/hello").mock(
        return_value=httpx.Response(
            200, text="name: World\n", headers={"content-type": "application/x-yaml"}
        )
    )

    data = await DataResolver(cache).resolve("https://data.test/hello")

    assert data == {"name": "World"}


async def test_remote_unknown_format(
    respx_mock: respx.MockRouter, cache: RequestCache
) -> None:
    respx_mock.get("https://data.test/hello").mock(
        return_value=httpx.Response(200, text="<html></html>", headers={"content-type": "text/html"})
    )

    with pytest.raises(UnrecognizedFormatError) as excinfo:
        await DataResolver(cache).resolve("https://data.test/hello")
    assert excinfo.value.url == "https://data.test/hello"


async def test_remote_invalid_json_carries_url(
    respx_mock: respx.MockRouter, cache: RequestCache
) -> None:
    respx_mock.get("https://data.test/hello.json").mock(
        return_value=httpx.Response(200, text="not json")
    )

    with pytest.raises(DataParseError) as excinfo:
        await DataResolver(cache).resolve("https://data.test/hello.json")
    assert excinfo.value.url == "https://data.test/hello.json"


async def test_remote_404(respx_mock: respx.MockRouter, cache: RequestCache) -> None:
    respx_mock.get("https://data.test/hello.json").mock(return_value=httpx.Response(404))

    with pytest.raises(BadStatusError) as excinfo:
        await DataResolver(cache).resolve("https://data.test/hello.json")
    assert excinfo.value.url == "https://data.test/hello.json"


async def test_repeated_urls_are_fetched_once(
    respx_mock: respx.MockRouter, cache: RequestCache
) -> None:
    route = respx_mock.get("https://data.test/hello.json").mock(
        return_value=httpx.Response(200, text='{"name": "World"}')
    )
    resolver = DataResolver(cache)

    results = await asyncio.gather(
        *(resolver.resolve("https://data.test/hello.json") for _ in range(3))
    )
    results.append(await resolver.resolve("https://data.test/hello.json"))

    assert route.call_count == 1
    assert results == [{"name": "World"}] * 4


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ({"a": 1}, True),
        ({}, True),
        (["a"], True),
        ((1, 2), True),
        ("text", False),
        (b"bytes", False),
        (7, False),
        (None, False),
    ],
)
def test_is_object(value: object, expected: bool) -> None:
    assert is_object(value) is expected
