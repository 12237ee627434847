"""Data model shared by the parsers, the differ and the formatters."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Ecosystem(str, Enum):
    """Package ecosystems with a registered parser."""

    NODE = "node"
    PYTHON = "python"
    GO = "go"
    RUBY = "ruby"
    JAVA = "java"
    RUST = "rust"
    DOTNET = "dotnet"


# Iteration order of the enum is the authoritative ordering.
VALID_ECOSYSTEMS: Tuple[str, ...] = tuple(member.value for member in Ecosystem)


class DependencyType(str, Enum):
    """Role a dependency plays in the project declaring it."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    OPTIONAL = "optional"
    PEER = "peer"
    BUILD = "build"
    TEST = "test"


class ChangeType(str, Enum):
    """Category of difference between two declarations of one dependency."""

    ADDED = "added"
    REMOVED = "removed"
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRERELEASE = "prerelease"
    OTHER = "other"


@dataclass
class DependencyGroup:
    """Dependencies of one type extracted from a single file."""

    dependency_type: DependencyType
    dependencies: Dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.dependencies)


@dataclass
class DependencyChange:
    """A single detected change to a dependency declaration."""

    name: str
    ecosystem: Ecosystem
    file: str
    old_version: Optional[str]
    new_version: Optional[str]
    change_type: ChangeType
    dependency_type: DependencyType

    def __post_init__(self) -> None:
        """Validate that versions agree with the change type."""
        if not self.name:
            raise ValueError("Dependency change name cannot be empty")

        if self.change_type == ChangeType.ADDED:
            if self.old_version is not None or self.new_version is None:
                raise ValueError(f"Added dependency {self.name} must only have a new version")
        elif self.change_type == ChangeType.REMOVED:
            if self.new_version is not None or self.old_version is None:
                raise ValueError(f"Removed dependency {self.name} must only have an old version")
        elif self.old_version is None or self.new_version is None:
            raise ValueError(
                f"Changed dependency {self.name} must have both versions ({self.change_type.value})"
            )

    @property
    def key(self) -> Tuple[str, str]:
        """Identity of the logical dependency across files."""
        return (self.ecosystem.value, self.name)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the field names of the JSON report."""
        return {
            "name": self.name,
            "ecosystem": self.ecosystem.value,
            "file": self.file,
            "oldVersion": self.old_version,
            "newVersion": self.new_version,
            "changeType": self.change_type.value,
            "dependencyType": self.dependency_type.value,
        }


class DepUpliftError(Exception):
    """Base class for errors surfaced to the command line."""


class ContentLookupError(DepUpliftError):
    """Raised when revision content cannot be listed or retrieved at all."""


class ConfigurationError(DepUpliftError):
    """Raised when user supplied options cannot be used."""
