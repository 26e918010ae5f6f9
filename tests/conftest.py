"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

from pdb_gitlink.core.errors import EmbedError
from pdb_gitlink.models import SourceFileRecord

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


class RecordingReporter:
    """Collects pipeline messages instead of logging them."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def debug(self, message: str) -> None:
        self.messages.append(("debug", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def of(self, level: str) -> list[str]:
        return [message for lvl, message in self.messages if lvl == level]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


class FakeSymbolReader:
    """In-memory ``SymbolReader`` tracking its own lifetime."""

    def __init__(self, files: list[str], changed: list[str] | None = None) -> None:
        self.files = files
        self.changed = changed or []
        self.entered = False
        self.exited = False
        self.verify_calls = 0

    def __enter__(self) -> "FakeSymbolReader":
        self.entered = True
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.exited = True

    def get_files_and_checksums(self) -> dict[str, SourceFileRecord]:
        return {path: SourceFileRecord(build_time_path=path, checksum=b"\x01\x02") for path in self.files}

    def find_missing_or_changed_source_files(self) -> list[str]:
        self.verify_calls += 1
        return list(self.changed)


class FakeRepository:
    """In-memory ``Repository`` with a fixed index, remotes and HEAD."""

    def __init__(
        self,
        working_directory: Path,
        tracked: list[str],
        remotes: list[str] | None = None,
        head: str | None = "0123456789abcdef0123456789abcdef01234567",
    ) -> None:
        self.working_directory = working_directory
        self.tracked = tracked
        self.remotes = remotes if remotes is not None else ["https://github.com/acme/widgets.git"]
        self.head = head
        self.close_calls = 0

    def list_remotes(self) -> list[str]:
        return list(self.remotes)

    def head_commit_id(self) -> str | None:
        return self.head

    def tracked_files(self) -> list[str]:
        return list(self.tracked)

    def close(self) -> None:
        self.close_calls += 1


class FakeEmbedder:
    def __init__(self, error: str | None = None) -> None:
        self.error = error
        self.calls: list[tuple[Path, Path]] = []
        self.srcsrv_contents: list[bytes] = []

    def embed(self, pdb_path: Path, srcsrv_path: Path) -> None:
        self.calls.append((pdb_path, srcsrv_path))
        self.srcsrv_contents.append(srcsrv_path.read_bytes())
        if self.error is not None:
            raise EmbedError(self.error)
