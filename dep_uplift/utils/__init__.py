"""Utility functions and helpers for dep-uplift."""

from .logging import setup_logging, get_logger
from .path_utils import PathFilter, is_ignored_path, is_valid_file_path

__all__ = [
    "setup_logging",
    "get_logger",
    "PathFilter",
    "is_ignored_path",
    "is_valid_file_path",
]
