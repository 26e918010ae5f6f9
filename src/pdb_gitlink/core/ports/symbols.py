from types import TracebackType
from typing import Protocol

from pdb_gitlink.models import SourceFileRecord


class SymbolReader(Protocol):
    def __enter__(self) -> "SymbolReader": ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    def get_files_and_checksums(self) -> dict[str, SourceFileRecord]: ...

    def find_missing_or_changed_source_files(self) -> list[str]: ...
