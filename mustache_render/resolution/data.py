"""Resolving data references into the values handed to templates."""

from __future__ import annotations

import asyncio
import hashlib
import importlib.util
import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from ..core.errors import DataParseError
from ..core.references import (
    InlineReference,
    PathReference,
    Reference,
    UrlReference,
    data_reference,
)
from .cache import RequestCache
from .classifier import DataFormat, classify_file, classify_remote, parse_text

logger = logging.getLogger(__name__)

_MODULE_ATTRIBUTE = "data"


def is_object(value: Any) -> bool:
    """Whether ``value`` is a keyed container: a mapping or a non-string sequence."""
    if isinstance(value, (str, bytes)):
        return False
    return isinstance(value, (Mapping, Sequence))


def load_module_data(module_path: Path) -> Any:
    """Execute a Python file and return its module-level ``data`` value.

    Args:
        module_path: Path to the ``.py`` file

    Returns:
        The exported value, or an empty dict when nothing is exported
    """
    digest = hashlib.sha1(str(module_path).encode("utf-8")).hexdigest()[:12]
    spec = importlib.util.spec_from_file_location(
        f"_mustache_render_data_{digest}", module_path
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load data module: {module_path}")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    if not hasattr(module, _MODULE_ATTRIBUTE):
        logger.warning(
            f"Warning: {module_path} does not export anything; "
            f"did you assign to `{_MODULE_ATTRIBUTE}`?"
        )
        return {}

    exported = getattr(module, _MODULE_ATTRIBUTE)
    if not is_object(exported):
        logger.warning(f"Warning: {module_path} exported a non-object")
    elif len(exported) == 0:
        logger.warning(
            f"Warning: {module_path} does not export anything; "
            f"did you assign to `{_MODULE_ATTRIBUTE}`?"
        )
    return exported


def _parse(text: str, data_format: DataFormat, source: str, url: str | None = None) -> Any:
    try:
        return parse_text(text, data_format)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DataParseError(
            f"Unable to parse {source} as {data_format.value.upper()}: {exc}", url=url
        ) from exc


class DataResolver:
    """Turn data references into resolved data.

    Relative paths are read from ``base_dir``; remote documents go through the
    run's ``RequestCache``.
    """

    def __init__(self, cache: RequestCache, base_dir: Path | None = None) -> None:
        self.cache = cache
        self.base_dir = base_dir or Path.cwd()

    async def resolve(self, value: Any) -> Any:
        return await self.resolve_reference(data_reference(value))

    async def resolve_reference(self, reference: Reference) -> Any:
        if isinstance(reference, InlineReference):
            return reference.value
        if isinstance(reference, UrlReference):
            return await self._from_url(reference.url)
        return await self._from_file(reference.path)

    async def _from_url(self, url: str) -> Any:
        fetched = await asyncio.shield(self.cache.fetch(url))
        data_format = classify_remote(url, fetched.content_type)
        return _parse(fetched.text, data_format, url, url=url)

    async def _from_file(self, data_path: Path) -> Any:
        data_format = classify_file(data_path)
        full_path = self.base_dir / data_path

        if data_format is DataFormat.MODULE:
            return await asyncio.to_thread(load_module_data, full_path)

        text = await asyncio.to_thread(full_path.read_text, encoding="utf-8")
        return _parse(text, data_format, str(data_path))
