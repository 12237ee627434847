"""Ruby (Bundler) dependency file parsers."""

import re
from typing import List

from ..types import DependencyGroup, DependencyType, Ecosystem
from .base import WILDCARD_VERSION, BaseParser, DependencyCollector

GROUP_START_PATTERN = re.compile(r"^group\s+:(?:development|test)\b")
GEM_PATTERN = re.compile(r"""^gem\s+['"]([^'"]+)['"]\s*(?:,\s*['"]([^'"]+)['"])?""")
SPEC_PATTERN = re.compile(r"^\s{4}([a-zA-Z0-9_.-]+)\s+\(([^)]+)\)")


class GemfileParser(BaseParser):
    """Parser for Gemfile manifests."""

    ecosystem = Ecosystem.RUBY
    parser_type = "gemfile"

    def _parse(self, content: str) -> List[DependencyGroup]:
        collector = DependencyCollector()
        in_dev_group = False

        for line in content.split("\n"):
            trimmed = line.strip()

            if not trimmed or trimmed.startswith("#"):
                continue

            if GROUP_START_PATTERN.match(trimmed):
                in_dev_group = True
                continue
            if trimmed == "end":
                in_dev_group = False
                continue

            # gem 'name', '~> 1.0'
            match = GEM_PATTERN.match(trimmed)
            if not match:
                continue

            dep_type = DependencyType.DEVELOPMENT if in_dev_group else DependencyType.PRODUCTION
            if not collector.add(dep_type, match.group(1), match.group(2) or WILDCARD_VERSION):
                break

        return collector.groups()


class GemfileLockParser(BaseParser):
    """Parser for Gemfile.lock files."""

    ecosystem = Ecosystem.RUBY
    parser_type = "gemfile-lock"

    def _parse(self, content: str) -> List[DependencyGroup]:
        collector = DependencyCollector(limit=None)
        in_specs = False

        for line in content.split("\n"):
            if line.strip() == "specs:":
                in_specs = True
                continue

            # A new top-level section (GEM, PLATFORMS, DEPENDENCIES...) ends the specs
            if in_specs and re.match(r"^[A-Z]", line):
                in_specs = False
                continue

            if in_specs:
                # Nested requirement lines are indented six spaces and skipped
                match = SPEC_PATTERN.match(line)
                if match:
                    collector.add(DependencyType.PRODUCTION, match.group(1), match.group(2))

        return collector.groups()
