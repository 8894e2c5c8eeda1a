"""Mustache rendering of a single data/template pair."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import chevron

from ..core.models import RenderOptions
from ..core.references import data_reference, describe
from ..resolution.cache import RequestCache
from ..resolution.data import DataResolver, is_object
from ..resolution.template import TemplateResolver
from .io import write_output

logger = logging.getLogger(__name__)


def render_text(template: str, data: Any, partials_dir: Path, extension: str) -> str:
    """Render mustache ``template`` with ``data``.

    Partials named ``{{> name}}`` are read from ``partials_dir/name + extension``;
    missing partials render as empty strings.

    Args:
        template: Template source text
        data: Context handed to the template, any value
        partials_dir: Directory searched for partials
        extension: Partial file extension, with or without the leading dot

    Returns:
        Rendered text
    """
    return chevron.render(
        template=template,
        data=data,
        partials_path=str(partials_dir),
        partials_ext=extension.lstrip("."),
    )


def _describe_data(data: Any) -> str:
    if is_object(data):
        return f"{len(data)}-key object"
    return "non-object data"


class Renderer:
    """Render data/template pairs to files for one run.

    Every resolver shares the ``cache`` handed in, so a URL referenced by
    several renders is downloaded once.
    """

    def __init__(
        self,
        options: RenderOptions,
        cache: RequestCache,
        base_dir: Path | None = None,
    ) -> None:
        self.options = options
        self.cache = cache
        self.base_dir = base_dir or Path.cwd()
        self.data_resolver = DataResolver(cache, self.base_dir)
        self.template_resolver = TemplateResolver(cache, self.base_dir)

    @property
    def partials_dir(self) -> Path:
        return self.base_dir / self.options.directory

    async def render(self, data: Any, template: Any, dest: Path) -> Path:
        """Resolve ``data`` and ``template`` concurrently and write the output.

        Nothing is written when either resolution fails; the error propagates
        unchanged.

        Returns:
            The path that was written
        """
        outcomes = await asyncio.gather(
            self.data_resolver.resolve(data),
            self.template_resolver.resolve(template),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                logger.error(f"{dest}... ERROR")
                raise outcome
        resolved, body = outcomes

        logger.debug(f"Output {dest}:")
        output = render_text(body, resolved, self.partials_dir, self.options.extension)

        output_path = self.base_dir / dest
        await write_output(output_path, output)

        summary = (
            f"{_describe_data(resolved)} into {template} "
            f"from {describe(data_reference(data))}"
        )
        if is_object(resolved):
            logger.info(f"{dest}: {summary}")
        else:
            logger.warning(f"{dest}: {summary}")
        return output_path
