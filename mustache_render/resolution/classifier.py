"""Deciding how a data document should be parsed."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import PurePath
from typing import Any

import httpx
import yaml

from ..core.errors import UnrecognizedFormatError, UnsupportedDataFileError

_JSON_SUFFIXES = (".json", ".js")
_YAML_SUFFIXES = (".yaml", ".yml")


class DataFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"
    MODULE = "module"


def classify_file(path: PurePath) -> DataFormat:
    """Pick the format of a local data file from its suffix."""
    suffix = path.suffix.lower()
    if suffix == ".json":
        return DataFormat.JSON
    if suffix in _YAML_SUFFIXES:
        return DataFormat.YAML
    if suffix == ".py":
        return DataFormat.MODULE
    raise UnsupportedDataFileError(
        f"Data file must be JSON file, YAML file, or Python module. Given: {path}"
    )


def classify_remote(url: str, content_type: str) -> DataFormat:
    """Pick the format of remote data.

    The URL path suffix wins; the Content-Type header is only consulted when
    the suffix says nothing.
    """
    url_path = httpx.URL(url).path.lower()
    if url_path.endswith(_JSON_SUFFIXES):
        return DataFormat.JSON
    if url_path.endswith(_YAML_SUFFIXES):
        return DataFormat.YAML

    mime = content_type.lower()
    if "json" in mime or "javascript" in mime:
        return DataFormat.JSON
    if "yaml" in mime or "yml" in mime:
        return DataFormat.YAML

    raise UnrecognizedFormatError(
        "The data URL does not look like JSON or YAML", url=url
    )


def parse_text(text: str, data_format: DataFormat) -> Any:
    """Parse a JSON or YAML document."""
    if data_format is DataFormat.JSON:
        return json.loads(text)
    if data_format is DataFormat.YAML:
        return yaml.safe_load(text)
    raise ValueError(f"Cannot parse text as {data_format.value}")
