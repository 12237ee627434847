"""Python dependency file parsers."""

import re
from typing import Any, Dict, List, Optional, Tuple

from ..loaders import load_json, load_toml
from ..types import DependencyGroup, DependencyType, Ecosystem
from .base import WILDCARD_VERSION, BaseParser, DependencyCollector, resolve_version

# Pattern: package[extras] op version
REQUIREMENT_PATTERN = re.compile(r"^([a-zA-Z0-9._-]+(?:\[[^\]]+\])?)\s*([=<>!~]+)\s*([^\s;#]+)")
NAME_PATTERN = re.compile(r"^([a-zA-Z0-9._-]+)")
PEP508_PATTERN = re.compile(r"^([a-zA-Z0-9._-]+)(?:\[[^\]]*\])?\s*\(?\s*(?:([=<>!~]+)\s*([^;)]+))?")

# Poetry groups whose dependencies are development only
DEV_GROUPS = {"dev", "test", "lint", "typing"}


def _parse_pep508(requirement: str) -> Optional[Tuple[str, str]]:
    """Split a PEP 508 requirement string into name and version.

    Args:
        requirement: Requirement string (e.g., "requests[socks]>=2.25.0; python_version>'3'")

    Returns:
        Tuple of lower-cased name and version, or None if no name is present
    """
    match = PEP508_PATTERN.match(requirement.strip())
    if not match:
        return None
    version = (match.group(3) or "").strip()
    return match.group(1).lower(), version or WILDCARD_VERSION


class RequirementsParser(BaseParser):
    """Parser for pip requirements files."""

    ecosystem = Ecosystem.PYTHON
    parser_type = "requirements"

    def _parse(self, content: str) -> List[DependencyGroup]:
        collector = DependencyCollector()

        for line in content.split("\n"):
            line = line.strip()

            # Skip comments, empty lines and pip options (-r, -e, --index-url ...)
            if not line or line.startswith(("#", "-")):
                continue

            # Skip direct URLs and local paths
            if "://" in line or line.startswith((".", "/")):
                continue

            match = REQUIREMENT_PATTERN.match(line)
            if match:
                name = re.sub(r"\[.*\]", "", match.group(1)).lower()
                version = match.group(3)
            else:
                name_match = NAME_PATTERN.match(line)
                if not name_match:
                    continue
                name = name_match.group(1).lower()
                version = WILDCARD_VERSION

            if not collector.add(DependencyType.PRODUCTION, name, version):
                break

        return collector.groups()


class PyProjectParser(BaseParser):
    """Parser for pyproject.toml files (PEP 621 and Poetry)."""

    ecosystem = Ecosystem.PYTHON
    parser_type = "pyproject"

    def _parse(self, content: str) -> List[DependencyGroup]:
        data = load_toml(content)
        if not isinstance(data, dict):
            return []

        collector = DependencyCollector()
        project = data.get("project") if isinstance(data.get("project"), dict) else {}

        for requirement in self._requirement_list(project.get("dependencies")):
            self._add_requirement(collector, DependencyType.PRODUCTION, requirement)

        # Optional dependency groups are extras, reported as development
        for _, requirements in self._iter_section(project.get("optional-dependencies")):
            for requirement in self._requirement_list(requirements):
                self._add_requirement(collector, DependencyType.DEVELOPMENT, requirement)

        tool = data.get("tool") if isinstance(data.get("tool"), dict) else {}
        poetry = tool.get("poetry")
        if isinstance(poetry, dict):
            self._extract_poetry(collector, poetry)

        return collector.groups()

    def _extract_poetry(self, collector: DependencyCollector, poetry: Dict[str, Any]) -> None:
        for name, value in self._iter_section(poetry.get("dependencies")):
            # The python entry is the interpreter constraint, not a package
            if name.lower() == "python":
                continue
            collector.add(DependencyType.PRODUCTION, name.lower(), resolve_version(value))

        # Poetry < 1.2
        for name, value in self._iter_section(poetry.get("dev-dependencies")):
            collector.add(DependencyType.DEVELOPMENT, name.lower(), resolve_version(value))

        for group_name, group in self._iter_section(poetry.get("group")):
            if not isinstance(group, dict):
                continue
            dep_type = DependencyType.DEVELOPMENT if group_name in DEV_GROUPS else DependencyType.PRODUCTION
            for name, value in self._iter_section(group.get("dependencies")):
                collector.add(dep_type, name.lower(), resolve_version(value))

    @staticmethod
    def _requirement_list(value: Any) -> List[Any]:
        # A string here is malformed, not a single requirement
        return value if isinstance(value, list) else []

    @staticmethod
    def _add_requirement(collector: DependencyCollector, dep_type: DependencyType, requirement: Any) -> None:
        if not isinstance(requirement, str):
            return
        parsed = _parse_pep508(requirement)
        if parsed:
            collector.add(dep_type, *parsed)


class PipfileParser(BaseParser):
    """Parser for Pipenv Pipfile manifests."""

    ecosystem = Ecosystem.PYTHON
    parser_type = "pipfile"

    def _parse(self, content: str) -> List[DependencyGroup]:
        data = load_toml(content)
        if not isinstance(data, dict):
            return []

        collector = DependencyCollector()
        for section_name, dep_type in (
            ("packages", DependencyType.PRODUCTION),
            ("dev-packages", DependencyType.DEVELOPMENT),
        ):
            for name, value in self._iter_section(data.get(section_name)):
                collector.add(dep_type, name.lower(), resolve_version(value))

        return collector.groups()


class PoetryLockParser(BaseParser):
    """Parser for poetry.lock files."""

    ecosystem = Ecosystem.PYTHON
    parser_type = "poetry-lock"

    def _parse(self, content: str) -> List[DependencyGroup]:
        data = load_toml(content)
        if not isinstance(data, dict):
            return []

        collector = DependencyCollector(limit=None)
        for package in data.get("package") or []:
            if not isinstance(package, dict) or not package.get("name") or not package.get("version"):
                continue
            # Only lock files written before Poetry 1.5 carry a category
            dep_type = (
                DependencyType.DEVELOPMENT if package.get("category") == "dev" else DependencyType.PRODUCTION
            )
            collector.add(dep_type, str(package["name"]).lower(), str(package["version"]))

        return collector.groups()


class PipfileLockParser(BaseParser):
    """Parser for Pipfile.lock files."""

    ecosystem = Ecosystem.PYTHON
    parser_type = "pipfile-lock"

    def _parse(self, content: str) -> List[DependencyGroup]:
        data = load_json(content)
        if not isinstance(data, dict):
            return []

        collector = DependencyCollector(limit=None)
        for section_name, dep_type in (
            ("default", DependencyType.PRODUCTION),
            ("develop", DependencyType.DEVELOPMENT),
        ):
            for name, info in self._iter_section(data.get(section_name)):
                # VCS and path installs have no pinned version
                version = info.get("version") if isinstance(info, dict) else None
                if version:
                    collector.add(dep_type, name.lower(), str(version))

        return collector.groups()
