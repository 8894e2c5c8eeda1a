"""Turning ``files`` declarations into source/destination mappings.

Three declaration shapes are understood:

* a mapping of ``dest: src`` pairs,
* a list of ``{src, dest}`` entries whose ``src`` globs are expanded in place,
* list entries with ``expand: true`` that produce one mapping per matched file,
  building each destination from ``dest``, the path relative to ``cwd`` and
  an optional replacement extension.
"""

from __future__ import annotations

import glob
import logging
import re
from pathlib import Path, PurePosixPath
from typing import Any, Iterable

from ..core.errors import ConfigError
from ..core.models import FileDeclaration, FileMapping

logger = logging.getLogger(__name__)

_EXT_FIRST = re.compile(r"(\.[^/]*)?$")
_EXT_LAST = re.compile(r"(\.[^/.]*)?$")


def expand_patterns(patterns: Iterable[str], cwd: Path) -> list[str]:
    """Match glob patterns below ``cwd``.

    Patterns starting with ``!`` remove earlier matches. Only files are
    returned, as paths relative to ``cwd``, in pattern order without
    duplicates.

    Args:
        patterns: Glob patterns, ``**`` matching any number of directories
        cwd: Directory the patterns are relative to

    Returns:
        Matched relative paths using forward slashes
    """
    matched: list[str] = []
    for pattern in patterns:
        exclude = pattern.startswith("!")
        if exclude:
            pattern = pattern[1:]

        found = [
            Path(hit).as_posix()
            for hit in sorted(glob.glob(pattern, root_dir=cwd, recursive=True))
        ]
        if exclude:
            dropped = set(found)
            matched = [hit for hit in matched if hit not in dropped]
            continue

        for hit in found:
            if hit not in matched and (cwd / hit).is_file():
                matched.append(hit)

    return matched


def _as_patterns(src: Any) -> list[str] | None:
    if isinstance(src, str):
        return [src]
    if isinstance(src, list) and all(isinstance(item, str) for item in src):
        return src
    return None


def _replace_ext(path: str, ext: str | None, ext_dot: str) -> str:
    if ext is None:
        return path
    pattern = _EXT_FIRST if ext_dot == "first" else _EXT_LAST
    directory, _, name = path.rpartition("/")
    # leading dots belong to hidden file names, not extensions
    stem_offset = len(name) - len(name.lstrip("."))
    name = name[:stem_offset] + pattern.sub(ext, name[stem_offset:], count=1)
    return f"{directory}/{name}" if directory else name


def build_dest(dest: str, rel_path: str, ext: str | None, ext_dot: str, flatten: bool) -> str:
    """Compute the destination of one expanded source file."""
    if flatten:
        rel_path = PurePosixPath(rel_path).name
    return (PurePosixPath(dest) / _replace_ext(rel_path, ext, ext_dot)).as_posix()


def _expand_declaration(declaration: FileDeclaration, base_dir: Path) -> list[FileMapping]:
    overrides = declaration.overrides()

    if declaration.expand:
        if not isinstance(declaration.dest, str) or declaration.dest == "":
            raise ConfigError("dest must be specified as a string")
        patterns = _as_patterns(declaration.src)
        if patterns is None:
            raise ConfigError("Encountered incorrect source definition")

        cwd = PurePosixPath(declaration.cwd or ".")
        mappings = [
            FileMapping(
                src=[(cwd / rel_path).as_posix()],
                dest=build_dest(
                    declaration.dest,
                    rel_path,
                    declaration.ext,
                    declaration.ext_dot,
                    declaration.flatten,
                ),
                **overrides,
            )
            for rel_path in expand_patterns(patterns, base_dir / cwd)
        ]
        logger.debug(f"Expanded {patterns} in {cwd} to {len(mappings)} file(s)")
        return mappings

    fields: dict[str, Any] = {"dest": declaration.dest, **overrides}
    if "src" in declaration.model_fields_set:
        patterns = _as_patterns(declaration.src)
        fields["src"] = (
            expand_patterns(patterns, base_dir) if patterns is not None else declaration.src
        )
    return [FileMapping(**fields)]


def expand_files(
    files: list[FileDeclaration] | dict[str, Any], base_dir: Path
) -> list[FileMapping]:
    """Expand a target's ``files`` declaration.

    Args:
        files: List of declarations or a ``dest: src`` mapping
        base_dir: Directory source patterns are relative to

    Returns:
        One mapping per destination
    """
    if isinstance(files, dict):
        declarations = [
            FileDeclaration(dest=dest, src=src) for dest, src in files.items()
        ]
    else:
        declarations = files

    mappings: list[FileMapping] = []
    for declaration in declarations:
        mappings.extend(_expand_declaration(declaration, base_dir))
    return mappings
