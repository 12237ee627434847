"""Rust (Cargo) dependency file parsers."""

from typing import List

from ..loaders import load_toml
from ..types import DependencyGroup, DependencyType, Ecosystem
from .base import BaseParser, DependencyCollector, resolve_version


class CargoTomlParser(BaseParser):
    """Parser for Cargo.toml manifests."""

    ecosystem = Ecosystem.RUST
    parser_type = "cargo"

    SECTIONS = [
        ("dependencies", DependencyType.PRODUCTION),
        ("dev-dependencies", DependencyType.DEVELOPMENT),
        ("build-dependencies", DependencyType.BUILD),
    ]

    def _parse(self, content: str) -> List[DependencyGroup]:
        data = load_toml(content)
        if not isinstance(data, dict):
            return []

        collector = DependencyCollector()
        for section_name, dep_type in self.SECTIONS:
            # serde = "1.0" or serde = { version = "1.0", features = ["derive"] }
            for name, value in self._iter_section(data.get(section_name)):
                if not collector.add(dep_type, name, resolve_version(value)):
                    break

        return collector.groups()


class CargoLockParser(BaseParser):
    """Parser for Cargo.lock files."""

    ecosystem = Ecosystem.RUST
    parser_type = "cargo-lock"

    def _parse(self, content: str) -> List[DependencyGroup]:
        data = load_toml(content)
        if not isinstance(data, dict):
            return []

        collector = DependencyCollector(limit=None)
        for package in data.get("package") or []:
            if isinstance(package, dict) and package.get("name") and package.get("version"):
                collector.add(DependencyType.PRODUCTION, str(package["name"]), str(package["version"]))

        return collector.groups()
