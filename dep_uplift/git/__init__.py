"""Access to file contents at two points in a repository's history."""

from .content import ContentProvider, GitContentProvider, LocalFileContentProvider

__all__ = [
    "ContentProvider",
    "GitContentProvider",
    "LocalFileContentProvider",
]
