"""Resolving template references into template text."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from ..core.references import UrlReference, template_reference
from .cache import RequestCache


class TemplateResolver:
    """Read template bodies from disk or through the run's ``RequestCache``."""

    def __init__(self, cache: RequestCache, base_dir: Path | None = None) -> None:
        self.cache = cache
        self.base_dir = base_dir or Path.cwd()

    async def resolve(self, value: Any) -> str:
        reference = template_reference(value)
        if isinstance(reference, UrlReference):
            fetched = await asyncio.shield(self.cache.fetch(reference.url))
            return fetched.text
        return await asyncio.to_thread(
            (self.base_dir / reference.path).read_text, encoding="utf-8"
        )
