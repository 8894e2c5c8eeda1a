"""CLI argument parsers and validators."""

from __future__ import annotations

import json
from typing import Any

import typer


def parse_data(value: str) -> Any:
    """Parse a --data value.

    Values that look like a JSON object or array are decoded and used as
    inline data; anything else stays a path or URL.
    """
    if not value.lstrip().startswith(("{", "[")):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"Invalid inline JSON data: {e}") from e


def parse_extension(value: str) -> str:
    """Normalize a partial extension to start with a dot."""
    value = value.strip()
    if value == "":
        raise typer.BadParameter("Extension must not be empty")
    return value if value.startswith(".") else f".{value}"
