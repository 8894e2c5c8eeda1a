"""Domain models for render configuration and task entries."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .settings import get_settings


class RenderOptions(BaseModel):
    """Options shared by every file of a target.

    ``data`` and ``template`` are defaults for files that do not declare
    their own; whether they were given at all is tracked through
    ``model_fields_set`` so that an explicit ``null`` still counts.
    """

    directory: str = Field(
        default_factory=lambda: get_settings().directory,
        description="Base directory for partials",
    )
    extension: str = Field(
        default_factory=lambda: get_settings().extension,
        description="File extension of partials",
    )
    data: Any = Field(default=None, description="Default data reference")
    template: Any = Field(default=None, description="Default template reference")

    @property
    def has_data(self) -> bool:
        return "data" in self.model_fields_set


class FileDeclaration(BaseModel):
    """One entry of a target's ``files`` list, before glob expansion."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    src: Any = None
    dest: Any = None
    data: Any = None
    template: Any = None
    expand: bool = False
    cwd: str | None = None
    ext: str | None = None
    ext_dot: Literal["first", "last"] = Field(default="first", alias="extDot")
    flatten: bool = False

    def overrides(self) -> dict[str, Any]:
        """Per-file data/template values that were explicitly declared."""
        return {
            key: getattr(self, key)
            for key in ("data", "template")
            if key in self.model_fields_set
        }


class FileMapping(BaseModel):
    """A source/destination mapping after glob expansion."""

    src: Any = None
    dest: Any = None
    data: Any = None
    template: Any = None

    @property
    def has_src(self) -> bool:
        return "src" in self.model_fields_set

    @property
    def has_data(self) -> bool:
        return "data" in self.model_fields_set


class TargetConfig(BaseModel):
    """A named group of files rendered with shared options."""

    options: dict[str, Any] = Field(default_factory=dict)
    files: list[FileDeclaration] | dict[str, Any] = Field(default_factory=list)


class TaskConfig(BaseModel):
    """A whole configuration file."""

    options: dict[str, Any] = Field(default_factory=dict)
    targets: dict[str, TargetConfig] = Field(..., min_length=1)
    base_dir: Path = Field(default_factory=Path.cwd, exclude=True)


class TaskEntry(BaseModel):
    """A single, fully specified render job."""

    model_config = ConfigDict(frozen=True)

    data: Any = Field(..., description="Data reference")
    template: Any = Field(..., description="Template reference")
    dest: Path = Field(..., description="Output file path")
