"""Turning file mappings into render jobs and running them together."""

from __future__ import annotations

import asyncio
import logging
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import httpx

from ..core.config import target_options
from ..core.errors import ConfigError
from ..core.models import FileMapping, RenderOptions, TaskConfig, TaskEntry
from ..files.expansion import expand_files
from .session import render_session

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of one batch run."""

    rendered: list[Path] = field(default_factory=list)
    failures: list[tuple[Path, BaseException]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _task_entry(mapping: FileMapping, options: RenderOptions) -> TaskEntry | None:
    dest = mapping.dest
    if not isinstance(dest, str) or dest == "":
        raise ConfigError("dest must be specified as a string")

    if mapping.has_data:
        data, has_data = mapping.data, True
    elif options.has_data:
        data, has_data = options.data, True
    else:
        data, has_data = None, False
    template = mapping.template or options.template

    if mapping.has_src:
        src = mapping.src
        if not isinstance(src, list):
            raise ConfigError("Encountered incorrect source definition")
        if len(src) > 1:
            raise ConfigError(
                f"Encountered multiple inputs for {dest}: {', '.join(map(str, src))} "
                "(did you enable expand and configure extDot correctly?)"
            )
        if not src:
            return None
        if has_data:
            # only one of data/template may come from the source file
            if template:
                raise ConfigError("Use either data OR template with source files")
            return TaskEntry(data=data, template=src[0], dest=Path(dest))
        if template:
            return TaskEntry(data=src[0], template=template, dest=Path(dest))
        raise ConfigError("data or template must be used with source files")

    if has_data and template:
        return TaskEntry(data=data, template=template, dest=Path(dest))
    raise ConfigError("Please specify data and template for each file")


def expand_tasks(
    mappings: Iterable[FileMapping], options: RenderOptions
) -> list[TaskEntry]:
    """Validate file mappings and build one task entry per destination.

    Mappings whose source list is empty are skipped.

    Args:
        mappings: Expanded source/destination mappings
        options: Target options supplying default data and template

    Returns:
        Task entries in declaration order

    Raises:
        ConfigError: On the first malformed mapping
    """
    entries = [_task_entry(mapping, options) for mapping in mappings]
    return [entry for entry in entries if entry is not None]


def _log_failure(dest: Path, exc: BaseException) -> None:
    url = getattr(exc, "url", None)
    logger.error(f"{dest}: {exc}" + (f" for {url}" if url else ""))

    lines = [
        line
        for chunk in traceback.format_exception(exc)
        for line in chunk.splitlines()
        if line.strip()
    ]
    for line in lines[1:]:
        logger.debug(line)


async def run_batch(
    entries: list[TaskEntry],
    options: RenderOptions,
    base_dir: Path | None = None,
    client: httpx.AsyncClient | None = None,
) -> BatchResult:
    """Render every entry concurrently.

    Entries do not cancel each other: a failing entry leaves the others
    running and outputs already written stay in place.

    Args:
        entries: Task entries to render
        options: Partial lookup options
        base_dir: Directory relative paths are resolved against
        client: HTTP client to use instead of a private one

    Returns:
        Written paths and per-destination failures
    """
    result = BatchResult()
    if not entries:
        logger.error("Nothing to do (are sources correctly specified?)")
        return result

    logger.debug(f"Rendering {len(entries)} file(s)")

    async with render_session(options, base_dir, client) as renderer:
        outcomes = await asyncio.gather(
            *(renderer.render(entry.data, entry.template, entry.dest) for entry in entries),
            return_exceptions=True,
        )
        downloads = renderer.cache.calls

    for entry, outcome in zip(entries, outcomes):
        if isinstance(outcome, BaseException):
            result.failures.append((entry.dest, outcome))
            _log_failure(entry.dest, outcome)
        else:
            result.rendered.append(outcome)

    if result.ok:
        logger.info(
            f"Files successfully written: {len(result.rendered)} "
            f"({downloads} download(s))"
        )
    else:
        logger.error(
            f"{len(result.failures)} of {len(entries)} file(s) failed to render"
        )
    return result


async def run_target(
    config: TaskConfig, name: str, client: httpx.AsyncClient | None = None
) -> BatchResult:
    """Expand, validate and render one named target of ``config``."""
    options = target_options(config, name)
    mappings = expand_files(config.targets[name].files, config.base_dir)
    entries = expand_tasks(mappings, options)

    logger.info(f"Running target {name!r}")
    return await run_batch(entries, options, config.base_dir, client)
