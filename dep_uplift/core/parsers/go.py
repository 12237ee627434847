"""Go module file parsers."""

import re
from typing import List

from ..types import DependencyGroup, DependencyType, Ecosystem
from .base import BaseParser, DependencyCollector

BLOCK_ENTRY_PATTERN = re.compile(r"^(\S+)\s+(v[\d.]+[\w.+-]*)")
SINGLE_REQUIRE_PATTERN = re.compile(r"^require\s+(\S+)\s+(v[\d.]+[\w.+-]*)")
SUM_PATTERN = re.compile(r"^(\S+)\s+(v[\d.]+[\w.+-]*?)(?:/go\.mod)?\s+")

INDIRECT_MARKER = "// indirect"


class GoModParser(BaseParser):
    """Parser for go.mod files.

    Only direct requirements are reported; entries marked ``// indirect``
    are transitive and skipped.
    """

    ecosystem = Ecosystem.GO
    parser_type = "gomod"

    def _parse(self, content: str) -> List[DependencyGroup]:
        collector = DependencyCollector()
        in_require_block = False

        for line in content.split("\n"):
            trimmed = line.strip()

            if not trimmed or trimmed.startswith("//"):
                continue

            if re.match(r"^require\s*\($", trimmed):
                in_require_block = True
                continue
            if trimmed == ")":
                in_require_block = False
                continue

            pattern = BLOCK_ENTRY_PATTERN if in_require_block else SINGLE_REQUIRE_PATTERN
            match = pattern.match(trimmed)
            if not match or INDIRECT_MARKER in line:
                continue

            if not collector.add(DependencyType.PRODUCTION, match.group(1), match.group(2)):
                break

        return collector.groups()


class GoSumParser(BaseParser):
    """Parser for go.sum checksum files."""

    ecosystem = Ecosystem.GO
    parser_type = "gosum"

    def _parse(self, content: str) -> List[DependencyGroup]:
        # Each module has an h1 line for the zip and one for its go.mod
        collector = DependencyCollector(limit=None, first_wins=True)

        for line in content.split("\n"):
            match = SUM_PATTERN.match(line.strip())
            if match:
                collector.add(DependencyType.PRODUCTION, match.group(1), match.group(2))

        return collector.groups()
