"""File output for rendered templates."""

from __future__ import annotations

import asyncio
import os
import stat
import tempfile
from pathlib import Path

# read once at import; os.umask can only be queried by setting it
_UMASK = os.umask(0)
os.umask(_UMASK)


def output_mode(path: Path) -> int:
    """Permission bits for a rendered file at ``path``.

    An existing output keeps its mode across re-renders; a new one gets the
    regular file default under the process umask.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_UMASK


def atomic_write_text(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` in one step.

    The text goes to a hidden sibling file which is renamed over the
    destination, so readers see either the old or the new output. Missing
    parent directories are created.

    Args:
        path: Output file path
        text: Rendered text, written as UTF-8 without newline translation
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = output_mode(path)

    fd, staging = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    staged = Path(staging)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        staged.chmod(mode)
        staged.replace(path)
    except BaseException:
        staged.unlink(missing_ok=True)
        raise


async def write_output(path: Path, text: str) -> None:
    await asyncio.to_thread(atomic_write_text, path, text)
