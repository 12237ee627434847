"""NuGet dependency file parsers for .NET projects."""

from typing import List

from ..types import DependencyGroup, DependencyType, Ecosystem
from .base import BaseParser, DependencyCollector
from .xmltools import child_text, children, local_name, parse_xml


class DotnetProjectParser(BaseParser):
    """Parser for SDK-style project files and legacy packages.config.

    Handles ``<PackageReference Include="..." Version="..." />`` in
    .csproj/.fsproj/.vbproj files and ``<package id="..." version="..." />``
    in packages.config.
    """

    ecosystem = Ecosystem.DOTNET
    parser_type = "nuget"

    def _parse(self, content: str) -> List[DependencyGroup]:
        root = parse_xml(content)
        if root is None:
            return []

        collector = DependencyCollector()
        root_name = local_name(root.tag)

        if root_name == "Project":
            for item_group in children(root, "ItemGroup"):
                for reference in children(item_group, "PackageReference"):
                    name = reference.get("Include")
                    version = reference.get("Version") or child_text(reference, "Version")
                    if name and version:
                        collector.add(DependencyType.PRODUCTION, name, version)

        elif root_name == "packages":
            for package in children(root, "package"):
                name = package.get("id")
                version = package.get("version")
                if name and version:
                    collector.add(DependencyType.PRODUCTION, name, version)

        return collector.groups()
