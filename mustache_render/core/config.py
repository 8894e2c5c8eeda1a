"""Loading task configuration files."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import ConfigError
from .models import RenderOptions, TaskConfig

logger = logging.getLogger(__name__)


def load_config(config_path: Path) -> TaskConfig:
    """Load a YAML or JSON task configuration.

    Args:
        config_path: Path to the configuration file

    Returns:
        Parsed configuration; relative paths inside it are resolved against
        the directory holding the file.
    """
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Unable to parse {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")

    try:
        config = TaskConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{exc}") from exc

    config.base_dir = config_path.resolve().parent
    logger.debug(f"Loaded {len(config.targets)} target(s) from {config_path}")
    return config


def target_options(config: TaskConfig, name: str) -> RenderOptions:
    """Merge global and per-target options, the target winning key by key."""
    if name not in config.targets:
        raise ConfigError(f"Unknown target: {name!r}")

    merged = {**config.options, **config.targets[name].options}
    try:
        return RenderOptions.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid options for target {name!r}:\n{exc}") from exc
