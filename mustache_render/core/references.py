"""Tagged references to data and template sources."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from .errors import InvalidInputError

_URL_PATTERN = re.compile(r"^https?:")


@dataclass(frozen=True)
class InlineReference:
    """Data given directly in the configuration."""

    value: Any


@dataclass(frozen=True)
class PathReference:
    """A local file."""

    path: Path


@dataclass(frozen=True)
class UrlReference:
    """A remote HTTP(S) resource."""

    url: str


Reference = Union[InlineReference, PathReference, UrlReference]


def is_url(value: str) -> bool:
    return bool(_URL_PATTERN.match(value))


def data_reference(value: Any) -> Reference:
    """Classify a data reference.

    Non-string values and the empty string are inline data, strings that
    start with ``http:`` or ``https:`` are URLs and anything else is a path.

    Raises:
        InvalidInputError: If ``value`` is None
    """
    if value is None:
        raise InvalidInputError("Data must be defined and not null")
    if not isinstance(value, str) or value == "":
        return InlineReference(value)
    if is_url(value):
        return UrlReference(value)
    return PathReference(Path(value))


def template_reference(value: Any) -> PathReference | UrlReference:
    """Classify a template reference; templates are never inline.

    Raises:
        InvalidInputError: If ``value`` is not a non-empty string
    """
    if not isinstance(value, str) or value == "":
        raise InvalidInputError("Template path or URL must be given as a string")
    if is_url(value):
        return UrlReference(value)
    return PathReference(Path(value))


def describe(reference: Reference) -> str:
    """Human-readable source of a reference, used in log lines."""
    if isinstance(reference, UrlReference):
        return reference.url
    if isinstance(reference, PathReference):
        return str(reference.path)
    return "inline data"
