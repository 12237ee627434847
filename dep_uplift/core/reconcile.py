"""Collapse changes reported by several files into one change per package."""

from typing import Dict, Iterable, List, Tuple

from .types import DependencyChange


def is_lock_file(file_path: str) -> bool:
    """Heuristic used to tell generated lock files from hand-written manifests."""
    return "lock" in file_path


def reconcile_changes(changes: Iterable[DependencyChange]) -> List[DependencyChange]:
    """Keep one change per ``(ecosystem, name)``.

    A change from a manifest replaces an earlier one from a lock file. In
    every other collision the first change seen is kept.

    Args:
        changes: Changes from all analysed files, in analysis order

    Returns:
        Reconciled changes, in order of first appearance of each key
    """
    seen: Dict[Tuple[str, str], DependencyChange] = {}

    for change in changes:
        existing = seen.get(change.key)
        if existing is None:
            seen[change.key] = change
        elif is_lock_file(existing.file) and not is_lock_file(change.file):
            seen[change.key] = change

    return list(seen.values())
