import logging
import subprocess
from pathlib import Path

from pdb_gitlink.config import get_git_executable
from pdb_gitlink.core.errors import RepositoryNotFoundError

logger = logging.getLogger(__name__)


class GitRepository:
    """Read-only view of a checkout, backed by the ``git`` executable.

    Implements the ``Repository`` protocol.
    """

    def __init__(self, git_dir: str | Path, git_executable: str | None = None) -> None:
        self._git_dir = Path(git_dir)
        self._git = git_executable or get_git_executable()
        self._tracked: list[str] | None = None
        self._closed = False
        if not self._git_dir.exists():
            raise RepositoryNotFoundError(self._git_dir)
        result = self._run(["rev-parse", "--git-dir"])
        if result.returncode != 0:
            raise RepositoryNotFoundError(self._git_dir)

    @property
    def git_dir(self) -> Path:
        return self._git_dir

    @property
    def working_directory(self) -> Path:
        return self._git_dir.parent

    @property
    def closed(self) -> bool:
        return self._closed

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            [self._git, f"--git-dir={self._git_dir}", f"--work-tree={self.working_directory}", *args],
            check=False,
            capture_output=True,
            encoding="utf-8",
            errors="surrogateescape",
        )

    def _output(self, args: list[str]) -> str:
        if self._closed:
            raise ValueError("Repository handle is closed.")
        result = self._run(args)
        if result.returncode != 0:
            logger.debug("git %s failed: %s", " ".join(args), result.stderr.strip())
            return ""
        return result.stdout

    def list_remotes(self) -> list[str]:
        output = self._output(["config", "--get-regexp", r"^remote\..*\.url$"])
        urls: list[str] = []
        for line in output.splitlines():
            parts = line.split(maxsplit=1)
            if len(parts) == 2:
                urls.append(parts[1].strip())
        return urls

    def head_commit_id(self) -> str | None:
        commit = self._output(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"]).strip()
        return commit or None

    def tracked_files(self) -> list[str]:
        if self._tracked is None:
            output = self._output(["ls-files", "-z"])
            self._tracked = [entry for entry in output.split("\0") if entry]
        return list(self._tracked)

    def close(self) -> None:
        self._tracked = None
        self._closed = True
