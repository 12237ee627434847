"""Dependency file parsers for the supported ecosystems."""

from .base import MAX_DEPENDENCIES, WILDCARD_VERSION, BaseParser, resolve_version
from .dotnet import DotnetProjectParser
from .go import GoModParser, GoSumParser
from .java import GradleParser, PomXmlParser
from .nodejs import PackageJsonParser, PackageLockParser, PnpmLockParser, YarnLockParser
from .python import (
    PipfileLockParser,
    PipfileParser,
    PoetryLockParser,
    PyProjectParser,
    RequirementsParser,
)
from .registry import DependencyFile, FilePattern, ParserRegistry
from .ruby import GemfileLockParser, GemfileParser
from .rust import CargoLockParser, CargoTomlParser

# Register built-in parsers
registry = ParserRegistry()

# Node.js parsers
registry.register(PackageJsonParser(), file_names=["package.json"])
registry.register(PackageLockParser(), file_names=["package-lock.json"])
registry.register(YarnLockParser(), file_names=["yarn.lock"])
registry.register(PnpmLockParser(), file_names=["pnpm-lock.yaml"])

# Python parsers
registry.register(
    RequirementsParser(),
    file_names=["requirements.txt", "requirements-dev.txt", "requirements-test.txt"],
)
registry.register(PyProjectParser(), file_names=["pyproject.toml"])
registry.register(PipfileParser(), file_names=["Pipfile"])
registry.register(PoetryLockParser(), file_names=["poetry.lock"])
registry.register(PipfileLockParser(), file_names=["Pipfile.lock"])

# Go parsers
registry.register(GoModParser(), file_names=["go.mod"])
registry.register(GoSumParser(), file_names=["go.sum"])

# Ruby parsers
registry.register(GemfileParser(), file_names=["Gemfile"])
registry.register(GemfileLockParser(), file_names=["Gemfile.lock"])

# Java parsers
registry.register(PomXmlParser(), file_names=["pom.xml"])
registry.register(
    GradleParser(),
    file_names=["build.gradle", "build.gradle.kts"],
    extensions=[".gradle", ".gradle.kts"],
)

# Rust parsers
registry.register(CargoTomlParser(), file_names=["Cargo.toml"])
registry.register(CargoLockParser(), file_names=["Cargo.lock"])

# .NET parsers
registry.register(
    DotnetProjectParser(),
    file_names=["packages.config"],
    extensions=[".csproj", ".fsproj", ".vbproj"],
)

__all__ = [
    "BaseParser",
    "DependencyFile",
    "FilePattern",
    "ParserRegistry",
    "registry",
    "resolve_version",
    "MAX_DEPENDENCIES",
    "WILDCARD_VERSION",
    "PackageJsonParser",
    "PackageLockParser",
    "YarnLockParser",
    "PnpmLockParser",
    "RequirementsParser",
    "PyProjectParser",
    "PipfileParser",
    "PoetryLockParser",
    "PipfileLockParser",
    "GoModParser",
    "GoSumParser",
    "GemfileParser",
    "GemfileLockParser",
    "PomXmlParser",
    "GradleParser",
    "CargoTomlParser",
    "CargoLockParser",
    "DotnetProjectParser",
]
