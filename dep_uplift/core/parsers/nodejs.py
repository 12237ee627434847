"""Node.js dependency file parsers."""

import re
from typing import Any, Dict, List, Optional

from ..loaders import load_json, load_yaml
from ..types import DependencyGroup, DependencyType, Ecosystem
from .base import BaseParser, DependencyCollector, resolve_version


class PackageJsonParser(BaseParser):
    """Parser for package.json manifests."""

    ecosystem = Ecosystem.NODE
    parser_type = "package"

    SECTIONS = [
        ("dependencies", DependencyType.PRODUCTION),
        ("devDependencies", DependencyType.DEVELOPMENT),
        ("optionalDependencies", DependencyType.OPTIONAL),
        ("peerDependencies", DependencyType.PEER),
    ]

    def _parse(self, content: str) -> List[DependencyGroup]:
        data = load_json(content)
        if not isinstance(data, dict):
            return []

        collector = DependencyCollector()
        for section_name, dep_type in self.SECTIONS:
            for name, value in self._iter_section(data.get(section_name)):
                if not collector.add(dep_type, name, resolve_version(value)):
                    break

        return collector.groups()


class PackageLockParser(BaseParser):
    """Parser for package-lock.json (lockfile v1/v2 and v3)."""

    ecosystem = Ecosystem.NODE
    parser_type = "package-lock"

    def _parse(self, content: str) -> List[DependencyGroup]:
        # Lock files legitimately nest deeper than manifests in v1 format
        data = load_json(content, max_depth=64)
        if not isinstance(data, dict):
            return []

        collector = DependencyCollector(limit=None)
        packages = data.get("packages")

        if isinstance(packages, dict):
            for path, info in packages.items():
                name = self._name_from_path(path)
                if not name or not isinstance(info, dict) or not info.get("version"):
                    continue
                collector.add(self._dependency_type(info), name, str(info["version"]))
        else:
            for name, info in self._iter_section(data.get("dependencies")):
                if not isinstance(info, dict) or not info.get("version"):
                    continue
                collector.add(self._dependency_type(info), name, str(info["version"]))

        return collector.groups()

    @staticmethod
    def _name_from_path(path: str) -> Optional[str]:
        """Extract the package name from a ``node_modules/...`` install path.

        ``node_modules/a/node_modules/@types/node`` resolves to ``@types/node``.
        """
        if not path.startswith("node_modules/"):
            return None
        name = path.split("node_modules/")[-1]
        return name or None

    @staticmethod
    def _dependency_type(info: Dict[str, Any]) -> DependencyType:
        return DependencyType.DEVELOPMENT if info.get("dev") else DependencyType.PRODUCTION


class YarnLockParser(BaseParser):
    """Parser for yarn.lock files (classic and berry)."""

    ecosystem = Ecosystem.NODE
    parser_type = "yarn"

    VERSION_PATTERN = re.compile(r'version:?\s+"?([^"\s]+)"?')

    def _parse(self, content: str) -> List[DependencyGroup]:
        collector = DependencyCollector(limit=None, first_wins=True)
        current_package: Optional[str] = None

        for line in content.split("\n"):
            if line and not line.startswith((" ", "#")) and "@" in line:
                current_package = self._package_from_header(line)
                continue

            if current_package and line.strip().startswith("version"):
                match = self.VERSION_PATTERN.search(line)
                if match:
                    collector.add(DependencyType.PRODUCTION, current_package, match.group(1))
                    current_package = None

        return collector.groups()

    @staticmethod
    def _package_from_header(line: str) -> Optional[str]:
        """Extract the package name from a header like ``"@babel/core@^7.0.0", ...:``."""
        first_spec = line.split(",")[0]
        spec = re.sub(r"[\"':]", "", first_spec).strip()
        at_index = spec.find("@", 1) if spec.startswith("@") else spec.find("@")
        if at_index <= 0:
            return None
        return spec[:at_index]


class PnpmLockParser(BaseParser):
    """Parser for pnpm-lock.yaml files."""

    ecosystem = Ecosystem.NODE
    parser_type = "pnpm"

    PEER_SUFFIX = re.compile(r"\(.+\)$")
    PACKAGE_KEY = re.compile(r"^/?(@?[^@]+)@(.+)$")

    def _parse(self, content: str) -> List[DependencyGroup]:
        data = load_yaml(content)
        if not isinstance(data, dict):
            return []

        collector = DependencyCollector(limit=None)

        for _, importer in self._iter_section(data.get("importers")):
            if not isinstance(importer, dict):
                continue
            for section_name, dep_type in (
                ("dependencies", DependencyType.PRODUCTION),
                ("devDependencies", DependencyType.DEVELOPMENT),
            ):
                for name, info in self._iter_section(importer.get(section_name)):
                    version = self._importer_version(info)
                    if version and not version.startswith("link:"):
                        collector.add(dep_type, name, self.PEER_SUFFIX.sub("", version))

        # Lockfiles before v6 have no importers section
        if not collector.total:
            for key, info in self._iter_section(data.get("packages")):
                match = self.PACKAGE_KEY.match(str(key))
                if not match:
                    continue
                name, version = match.group(1), match.group(2)
                if version.startswith("link:"):
                    continue
                is_dev = isinstance(info, dict) and info.get("dev")
                dep_type = DependencyType.DEVELOPMENT if is_dev else DependencyType.PRODUCTION
                collector.add(dep_type, name, self.PEER_SUFFIX.sub("", version))

        return collector.groups()

    @staticmethod
    def _importer_version(info: Any) -> Optional[str]:
        if isinstance(info, dict):
            version = info.get("version")
            return str(version) if version is not None else None
        if info is None:
            return None
        return str(info)
