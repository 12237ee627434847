"""Java (Maven and Gradle) dependency file parsers."""

import re
from typing import List, Optional, Tuple
from xml.etree.ElementTree import Element

from ..types import DependencyGroup, DependencyType, Ecosystem
from .base import BaseParser, DependencyCollector
from .xmltools import child, child_text, children, local_name, parse_xml

PRODUCTION_KEYWORDS = ("implementation", "api", "compile", "runtimeOnly", "compileOnly")
TEST_KEYWORDS = ("testImplementation", "testCompile", "testRuntimeOnly", "androidTestImplementation")

# implementation 'group:artifact:version' or implementation("group:artifact:version")
GRADLE_PATTERN = re.compile(
    r"(?<![\w.])(" + "|".join(TEST_KEYWORDS + PRODUCTION_KEYWORDS) + r")"
    r"\s*\(?\s*['\"]([\w.-]+):([\w.-]+):([\w.-]+)(?::[\w.-]+)?(?:@[\w.-]+)?['\"]"
)


def is_property_reference(version: str) -> bool:
    """Whether a version is an unresolved Maven property such as ``${spring.version}``."""
    return "${" in version


class PomXmlParser(BaseParser):
    """Parser for Maven pom.xml files.

    Parsing goes through defusedxml, so documents declaring a DTD or
    entities are rejected rather than expanded.
    """

    ecosystem = Ecosystem.JAVA
    parser_type = "maven"

    def _parse(self, content: str) -> List[DependencyGroup]:
        root = parse_xml(content)
        if root is None or local_name(root.tag) != "project":
            return []

        collector = DependencyCollector()

        for dependency in children(child(root, "dependencies"), "dependency"):
            coordinates = self._coordinates(dependency)
            if not coordinates:
                continue
            name, version = coordinates
            scope = child_text(dependency, "scope")
            dep_type = DependencyType.TEST if scope == "test" else DependencyType.PRODUCTION
            if not collector.add(dep_type, name, version):
                break

        # Managed versions only count for artifacts not declared directly
        managed = child(child(root, "dependencyManagement"), "dependencies")
        for dependency in children(managed, "dependency"):
            coordinates = self._coordinates(dependency)
            if not coordinates or collector.has(coordinates[0]):
                continue
            if not collector.add(DependencyType.PRODUCTION, *coordinates):
                break

        return collector.groups()

    @staticmethod
    def _coordinates(dependency: Element) -> Optional[Tuple[str, str]]:
        group_id = child_text(dependency, "groupId")
        artifact_id = child_text(dependency, "artifactId")
        version = child_text(dependency, "version")

        if not (group_id and artifact_id and version):
            return None
        if is_property_reference(version):
            return None
        return f"{group_id}:{artifact_id}", version


class GradleParser(BaseParser):
    """Parser for Gradle build scripts (Groovy and Kotlin DSL)."""

    ecosystem = Ecosystem.JAVA
    parser_type = "gradle"

    def _parse(self, content: str) -> List[DependencyGroup]:
        collector = DependencyCollector()

        for match in GRADLE_PATTERN.finditer(content):
            keyword, group_id, artifact_id, version = match.groups()
            dep_type = DependencyType.TEST if keyword in TEST_KEYWORDS else DependencyType.PRODUCTION
            if not collector.add(dep_type, f"{group_id}:{artifact_id}", version):
                break

        return collector.groups()
