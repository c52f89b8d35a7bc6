"""Utility exports."""

from .file_helper import atomic_write, ensure_parent, read_text, sibling_with_suffix, write_text
from .logging import JsonFormatter, configure_logging, get_logger, level_for_verbosity

__all__ = [
    "atomic_write",
    "ensure_parent",
    "read_text",
    "sibling_with_suffix",
    "write_text",
    "JsonFormatter",
    "configure_logging",
    "get_logger",
    "level_for_verbosity",
]
