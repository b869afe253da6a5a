"""Shared utilities for xpiport."""

from xpiport.core.utils.json import read_json, write_json
from xpiport.core.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "read_json",
    "write_json",
]
