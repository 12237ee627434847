"""Path utilities for validating and filtering changed file paths."""

import fnmatch
from typing import Iterable, Iterator, List, Optional

# Vendored and generated trees whose manifests are not the project's own
DEFAULT_IGNORE_PATTERNS = [
    "node_modules/*",
    "*/node_modules/*",
    "vendor/*",
    "*/vendor/*",
    ".git/*",
    "*/.venv/*",
    ".venv/*",
]

SYSTEM_PREFIXES = ("/etc", "/proc", "/sys", "/dev")


def is_valid_file_path(file_path: str) -> bool:
    """Check that a repository path cannot escape the repository.

    Args:
        file_path: Path as reported by ``git diff --name-only``

    Returns:
        False for empty, absolute, parent-relative or NUL-containing paths
    """
    if not file_path or "\0" in file_path:
        return False
    if file_path.startswith(("/", "\\")) or file_path.startswith(SYSTEM_PREFIXES):
        return False
    parts = file_path.replace("\\", "/").split("/")
    return ".." not in parts


class PathFilter:
    """Filters paths based on patterns and rules."""

    def __init__(self, ignore_patterns: Optional[List[str]] = None) -> None:
        """Initialize path filter.

        Args:
            ignore_patterns: Additional glob patterns to ignore
        """
        self.ignore_patterns = DEFAULT_IGNORE_PATTERNS + list(ignore_patterns or [])

    def is_ignored(self, path: str) -> bool:
        """Check if a path should be ignored.

        Args:
            path: Repository relative path to check

        Returns:
            True if path should be ignored
        """
        return any(fnmatch.fnmatch(path, pattern) for pattern in self.ignore_patterns)

    def filter_paths(self, paths: Iterable[str]) -> Iterator[str]:
        """Filter paths based on ignore patterns.

        Args:
            paths: Paths to filter

        Yields:
            Valid paths that should not be ignored
        """
        for path in paths:
            if is_valid_file_path(path) and not self.is_ignored(path):
                yield path


def is_ignored_path(path: str, ignore_patterns: Optional[List[str]] = None) -> bool:
    """Check if a path should be ignored.

    Args:
        path: Path to check
        ignore_patterns: Additional ignore patterns

    Returns:
        True if path should be ignored
    """
    return PathFilter(ignore_patterns).is_ignored(path)
