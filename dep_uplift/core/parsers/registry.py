"""Registry mapping dependency file names to their parsers."""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Dict, List, Optional, Sequence

from ..types import Ecosystem
from .base import BaseParser


@dataclass(frozen=True)
class FilePattern:
    """Which files a parser handles."""

    ecosystem: Ecosystem
    parser: BaseParser
    file_names: Sequence[str] = field(default_factory=tuple)
    extensions: Sequence[str] = field(default_factory=tuple)

    def matches_name(self, file_name: str) -> bool:
        return file_name in self.file_names

    def matches_extension(self, file_name: str) -> bool:
        return any(file_name.endswith(ext) for ext in self.extensions)


@dataclass(frozen=True)
class DependencyFile:
    """A changed file together with the parser that understands it."""

    path: str
    ecosystem: Ecosystem
    parser: BaseParser


class ParserRegistry:
    """Ordered table of file patterns.

    Registration order matters: when several patterns could claim a file, the
    first registered one wins.
    """

    def __init__(self) -> None:
        """Initialize the parser registry."""
        self._patterns: List[FilePattern] = []

    def register(
        self,
        parser: BaseParser,
        file_names: Sequence[str] = (),
        extensions: Sequence[str] = (),
    ) -> None:
        """Register a parser for exact file names and/or extension suffixes.

        Args:
            parser: Parser instance to register
            file_names: Exact base names handled (e.g. 'package.json')
            extensions: Suffixes handled (e.g. '.csproj')
        """
        pattern = FilePattern(
            ecosystem=parser.ecosystem,
            parser=parser,
            file_names=tuple(file_names),
            extensions=tuple(extensions),
        )
        self._patterns.append(pattern)

    @property
    def patterns(self) -> List[FilePattern]:
        return list(self._patterns)

    def get_parser_for_file(self, file_path: str) -> Optional[DependencyFile]:
        """Find the parser for a repository path.

        Exact file names are checked before extensions, and the first
        matching pattern wins.

        Args:
            file_path: Repository relative path, '/' separated

        Returns:
            Dependency file descriptor or None if the file is not recognised
        """
        file_name = PurePosixPath(file_path).name

        for pattern in self._patterns:
            if pattern.matches_name(file_name):
                return DependencyFile(path=file_path, ecosystem=pattern.ecosystem, parser=pattern.parser)

        for pattern in self._patterns:
            if pattern.matches_extension(file_name):
                return DependencyFile(path=file_path, ecosystem=pattern.ecosystem, parser=pattern.parser)

        return None

    def is_dependency_file(self, file_path: str) -> bool:
        return self.get_parser_for_file(file_path) is not None

    def get_supported_ecosystems(self) -> List[str]:
        """Get ecosystems with at least one registered parser, in registration order."""
        return list(dict.fromkeys(pattern.ecosystem.value for pattern in self._patterns))

    def get_supported_files(self) -> Dict[str, List[str]]:
        """Get recognised file names and extensions per ecosystem."""
        supported: Dict[str, List[str]] = {}
        for pattern in self._patterns:
            entries = supported.setdefault(pattern.ecosystem.value, [])
            entries.extend(pattern.file_names)
            entries.extend(f"*{ext}" for ext in pattern.extensions)
        return supported
