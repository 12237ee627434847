"""Core parsing, version classification and diffing logic for dep-uplift."""

from .config import AnalysisConfig
from .parsers import ParserRegistry, registry
from .reconcile import reconcile_changes
from .types import (
    ChangeType,
    ConfigurationError,
    ContentLookupError,
    DependencyChange,
    DependencyGroup,
    DependencyType,
    DepUpliftError,
    Ecosystem,
)
from .version import clean_version, compare_versions, determine_change_type

__all__ = [
    "AnalysisConfig",
    "ParserRegistry",
    "registry",
    "reconcile_changes",
    "ChangeType",
    "ConfigurationError",
    "ContentLookupError",
    "DependencyChange",
    "DependencyGroup",
    "DependencyType",
    "DepUpliftError",
    "Ecosystem",
    "clean_version",
    "compare_versions",
    "determine_change_type",
]
