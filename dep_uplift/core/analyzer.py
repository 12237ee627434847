"""Dependency change analysis across the files changed between two revisions."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..git.content import ContentProvider
from ..utils.logging import get_logger
from ..utils.path_utils import PathFilter
from .config import AnalysisConfig
from .loaders import MAX_CONTENT_SIZE
from .parsers import DependencyFile, ParserRegistry, registry as default_registry
from .reconcile import reconcile_changes
from .types import DependencyChange, DependencyGroup, DependencyType
from .version import compare_versions

logger = get_logger("ChangeAnalyzer")


@dataclass
class AnalysisResult:
    """Reconciled changes of one comparison."""

    changes: List[DependencyChange] = field(default_factory=list)
    files_analyzed: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.changes)

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON report shape."""
        return {
            "hasChanges": self.has_changes,
            "changesCount": self.count,
            "changes": [change.to_dict() for change in self.changes],
        }


def _merge_groups(
    groups: Iterable[DependencyGroup],
    include_dev_dependencies: bool,
) -> Dict[DependencyType, Dict[str, str]]:
    merged: Dict[DependencyType, Dict[str, str]] = {}
    for group in groups:
        if not include_dev_dependencies and group.dependency_type != DependencyType.PRODUCTION:
            continue
        merged.setdefault(group.dependency_type, {}).update(group.dependencies)
    return merged


def _within_size_cap(content: Optional[str], file_path: str) -> Optional[str]:
    if content is not None and len(content) > MAX_CONTENT_SIZE:
        logger.warning(f"File too large, skipping: {file_path}")
        return None
    return content


def analyze_file(
    dependency_file: DependencyFile,
    old_content: Optional[str],
    new_content: Optional[str],
    include_dev_dependencies: bool = True,
) -> List[DependencyChange]:
    """Compare the two revisions of a single dependency file.

    A file absent at one revision reports every entry of the other side as
    added or removed; a file absent at both reports nothing.

    Args:
        dependency_file: File path with its ecosystem and parser
        old_content: Content at the base revision, None if absent
        new_content: Content at the head revision, None if absent
        include_dev_dependencies: Also report non-production groups

    Returns:
        Changes grouped by dependency type, in first-seen type order
    """
    old_content = _within_size_cap(old_content, dependency_file.path)
    new_content = _within_size_cap(new_content, dependency_file.path)

    if not old_content and not new_content:
        return []

    parser = dependency_file.parser
    old_by_type = _merge_groups(parser.parse(old_content) if old_content else [], include_dev_dependencies)
    new_by_type = _merge_groups(parser.parse(new_content) if new_content else [], include_dev_dependencies)

    dependency_types = list(old_by_type)
    dependency_types.extend(dep_type for dep_type in new_by_type if dep_type not in old_by_type)

    changes: List[DependencyChange] = []
    for dep_type in dependency_types:
        changes.extend(
            compare_versions(
                old_by_type.get(dep_type, {}),
                new_by_type.get(dep_type, {}),
                dependency_file.ecosystem,
                dependency_file.path,
                dep_type,
            )
        )
    return changes


class ChangeAnalyzer:
    """Finds dependency version changes between two revisions."""

    def __init__(
        self,
        provider: ContentProvider,
        config: Optional[AnalysisConfig] = None,
        parser_registry: Optional[ParserRegistry] = None,
        path_filter: Optional[PathFilter] = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            provider: Source of file contents per revision
            config: Analysis options, defaults to every ecosystem with dev dependencies
            parser_registry: Parser lookup table, defaults to the built-in registry
            path_filter: Filter for vendored paths, defaults to the built-in ignore list
        """
        self.provider = provider
        self.config = config or AnalysisConfig()
        self.registry = parser_registry or default_registry
        self.path_filter = path_filter or PathFilter()

    def select_dependency_files(self, files: Iterable[str]) -> List[DependencyFile]:
        """Keep the changed paths that a registered parser understands."""
        selected = []
        for path in self.path_filter.filter_paths(files):
            dependency_file = self.registry.get_parser_for_file(path)
            if dependency_file is not None:
                selected.append(dependency_file)
        return selected

    async def _analyze_one(
        self,
        dependency_file: DependencyFile,
        base: str,
        head: str,
        semaphore: asyncio.Semaphore,
    ) -> List[DependencyChange]:
        async with semaphore:
            logger.debug(f"Analyzing {dependency_file.path}")
            old_content, new_content = await asyncio.gather(
                self.provider.get_content(dependency_file.path, base),
                self.provider.get_content(dependency_file.path, head),
            )

        return analyze_file(
            dependency_file,
            old_content,
            new_content,
            self.config.include_dev_dependencies,
        )

    async def analyze(self, files: Iterable[str], base: str, head: str) -> AnalysisResult:
        """Analyze changed files between two revisions.

        Args:
            files: Changed repository paths; non dependency files are ignored
            base: Base revision
            head: Head revision

        Returns:
            Reconciled changes for the configured ecosystems
        """
        dependency_files = self.select_dependency_files(files)
        logger.info(f"Found {len(dependency_files)} dependency files to analyze")

        if not dependency_files:
            return AnalysisResult()

        semaphore = asyncio.Semaphore(self.config.max_concurrency)
        per_file = await asyncio.gather(
            *(self._analyze_one(dependency_file, base, head, semaphore) for dependency_file in dependency_files)
        )

        all_changes = [
            change
            for changes in per_file
            for change in changes
            if self.config.allows(change.ecosystem)
        ]
        unique_changes = reconcile_changes(all_changes)
        logger.info(f"Detected {len(unique_changes)} dependency version changes")

        return AnalysisResult(
            changes=unique_changes,
            files_analyzed=[dependency_file.path for dependency_file in dependency_files],
        )

    async def analyze_revisions(self, base: str, head: str) -> AnalysisResult:
        """Analyze every file the provider reports as changed between two revisions.

        Raises:
            ContentLookupError: If the changed files cannot be listed
        """
        changed_files = await self.provider.get_changed_files(base, head)
        logger.info(f"Found {len(changed_files)} changed files")
        return await self.analyze(changed_files, base, head)
