"""Content lookup for files at two revisions of a repository."""

import asyncio
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..core.loaders import MAX_CONTENT_SIZE
from ..core.types import ContentLookupError
from ..utils.logging import get_logger
from ..utils.path_utils import is_valid_file_path

# Commit ids and symbolic refs such as main, origin/main, HEAD~1 or v1.2.0^
REVISION_PATTERN = re.compile(r"^(?!-)[A-Za-z0-9._/~^@{}-]+$")


def is_valid_revision(revision: str) -> bool:
    """Check that a revision cannot be mistaken for a git option or range."""
    return bool(revision) and ".." not in revision and REVISION_PATTERN.match(revision) is not None


class ContentProvider(ABC):
    """Source of file contents at a given revision."""

    @abstractmethod
    async def get_content(self, file_path: str, revision: str) -> Optional[str]:
        """Return the file's text at ``revision``, or None if it does not exist there."""

    async def get_changed_files(self, base: str, head: str) -> List[str]:
        """List paths that differ between two revisions."""
        raise ContentLookupError(f"{type(self).__name__} cannot list changed files")


class GitContentProvider(ContentProvider):
    """Reads file contents and changed paths from a local git repository."""

    def __init__(self, repo_path: Path = Path("."), git_executable: str = "git", timeout: float = 30.0) -> None:
        """Initialize the provider.

        Args:
            repo_path: Working tree of the repository
            git_executable: Git binary to invoke
            timeout: Seconds allowed for a single git command
        """
        self.repo_path = repo_path
        self.git_executable = git_executable
        self.timeout = timeout
        self.logger = get_logger("GitContentProvider")

    async def _run_git(self, *args: str) -> Tuple[int, bytes, bytes]:
        try:
            process = await asyncio.create_subprocess_exec(
                self.git_executable,
                *args,
                cwd=str(self.repo_path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ContentLookupError(f"Unable to run git in {self.repo_path}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise ContentLookupError(f"git {' '.join(args)} timed out after {self.timeout}s") from e

        return process.returncode, stdout, stderr

    async def get_content(self, file_path: str, revision: str) -> Optional[str]:
        """Return the content of ``file_path`` at ``revision``.

        Args:
            file_path: Repository relative path
            revision: Commit id or ref

        Returns:
            File text, or None if the file is absent, too large or the
            request is invalid
        """
        if not is_valid_file_path(file_path):
            self.logger.warning(f"Skipping invalid file path: {file_path}")
            return None

        if not is_valid_revision(revision):
            self.logger.warning(f"Invalid git revision: {revision}")
            return None

        try:
            returncode, stdout, _ = await self._run_git("show", f"{revision}:{file_path}")
        except ContentLookupError as e:
            self.logger.warning(str(e))
            return None

        if returncode != 0:
            self.logger.debug(f"{file_path} does not exist at {revision}")
            return None

        if len(stdout) > MAX_CONTENT_SIZE:
            self.logger.warning(f"File too large, skipping: {file_path}")
            return None

        return stdout.decode("utf-8", errors="replace")

    async def get_changed_files(self, base: str, head: str) -> List[str]:
        """List paths changed between ``base`` and ``head``.

        Raises:
            ContentLookupError: If git fails or a revision is invalid
        """
        for revision in (base, head):
            if not is_valid_revision(revision):
                raise ContentLookupError(f"Invalid git revision: {revision}")

        returncode, stdout, stderr = await self._run_git("diff", "--name-only", base, head, "--")
        if returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise ContentLookupError(f"git diff failed: {message}")

        return [line for line in stdout.decode("utf-8", errors="replace").splitlines() if line]


class LocalFileContentProvider(ContentProvider):
    """Serves one local file per revision.

    Lets two standalone files be compared as if they were the same path at
    two revisions.
    """

    def __init__(self, files: Dict[str, Optional[Path]]) -> None:
        """Initialize the provider.

        Args:
            files: Revision label to file on disk; None marks the file as absent
        """
        self.files = files

    async def get_content(self, file_path: str, revision: str) -> Optional[str]:
        path = self.files.get(revision)
        if path is None or not path.is_file():
            return None
        if path.stat().st_size > MAX_CONTENT_SIZE:
            return None
        return await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
