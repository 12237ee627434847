"""Base parser class and helpers shared by the ecosystem parsers."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ...utils.logging import get_logger
from ..types import DependencyGroup, DependencyType, Ecosystem

logger = get_logger("Parser")

# Version recorded for declarations that do not pin anything.
WILDCARD_VERSION = "*"

# Upper bound on entries a manifest parser collects from one file.
MAX_DEPENDENCIES = 5000


def resolve_version(value: Any, default: str = WILDCARD_VERSION) -> str:
    """Resolve a declared version to a plain string.

    Manifest formats let a dependency be declared either as a bare version
    string or as a table carrying a ``version`` key next to other options
    (``git``, ``path``, ``features``...).

    Args:
        value: Raw value from the parsed document
        default: Version used when no version is declared

    Returns:
        Version string
    """
    if isinstance(value, dict):
        version = value.get("version")
        return str(version) if version else default
    if value is None or value == "":
        return default
    return str(value)


class DependencyCollector:
    """Accumulates dependencies per type while a file is being parsed."""

    def __init__(self, limit: Optional[int] = MAX_DEPENDENCIES, first_wins: bool = False) -> None:
        self.limit = limit
        self.first_wins = first_wins
        self.total = 0
        self._groups: Dict[DependencyType, Dict[str, str]] = {}

    @property
    def full(self) -> bool:
        return self.limit is not None and self.total >= self.limit

    def add(self, dependency_type: DependencyType, name: str, version: str) -> bool:
        """Record a dependency.

        Returns:
            False once the collector has reached its limit
        """
        if self.full:
            return False

        deps = self._groups.setdefault(dependency_type, {})
        if name in deps:
            if not self.first_wins:
                deps[name] = version
            return True

        deps[name] = version
        self.total += 1
        return True

    def has(self, name: str) -> bool:
        return any(name in deps for deps in self._groups.values())

    def groups(self) -> List[DependencyGroup]:
        """Return the non-empty groups in the order they were first seen."""
        return [
            DependencyGroup(dependency_type=dep_type, dependencies=deps)
            for dep_type, deps in self._groups.items()
            if deps
        ]


class BaseParser(ABC):
    """Abstract base class for dependency file parsers.

    A parser turns the raw text of one dependency file into
    :class:`DependencyGroup` objects. Parsers hold no per-file state, so a
    single instance serves every lookup in the registry.
    """

    ecosystem: Ecosystem
    parser_type: str = ""

    def parse(self, content: str) -> List[DependencyGroup]:
        """Parse file content into dependency groups.

        Args:
            content: Raw text of the dependency file

        Returns:
            Non-empty dependency groups, or an empty list if the content
            could not be parsed
        """
        if not content or not content.strip():
            return []

        try:
            groups = self._parse(content)
        except Exception as e:
            logger.debug(f"Failed to parse {self.parser_type} content: {e}")
            return []

        return [group for group in groups if group.dependencies]

    @abstractmethod
    def _parse(self, content: str) -> List[DependencyGroup]:
        """Format specific parsing; may raise on malformed input."""

    @staticmethod
    def _iter_section(section: Any) -> Iterable[Tuple[str, Any]]:
        """Iterate a ``name -> declaration`` table, tolerating bad shapes."""
        if isinstance(section, dict):
            return section.items()
        return ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(ecosystem={self.ecosystem.value!r}, parser_type={self.parser_type!r})"
