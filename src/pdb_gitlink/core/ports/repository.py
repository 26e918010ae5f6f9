from pathlib import Path
from typing import Protocol


class Repository(Protocol):
    @property
    def working_directory(self) -> Path: ...

    def list_remotes(self) -> list[str]: ...

    def head_commit_id(self) -> str | None: ...

    def tracked_files(self) -> list[str]: ...

    def close(self) -> None: ...
