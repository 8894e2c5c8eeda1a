"""mustache-render - Mustache template renderer for build pipelines.

Renders templates against JSON, YAML or Python-module data taken from local
files, remote URLs or inline values.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export main CLI entry point
from .cli import main

__all__ = ["main", "__version__"]
