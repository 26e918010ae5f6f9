"""Read source-file paths and checksums out of a PDB via ``llvm-pdbutil``."""

from __future__ import annotations

import hashlib
import logging
import re
import subprocess
from pathlib import Path
from types import TracebackType

from pdb_gitlink.config import get_pdbutil_executable
from pdb_gitlink.core.errors import SymbolFileError
from pdb_gitlink.models import SourceFileRecord

logger = logging.getLogger(__name__)

# ``- (MD5: 0123ABCD...) C:\src\main.cpp`` or ``- C:\src\main.cpp``
_FILE_LINE_RE = re.compile(
    r"^\s*-\s+(?:\((?P<kind>[A-Za-z0-9]+):\s*(?P<hex>[0-9A-Fa-f]*)\)\s+)?(?P<path>\S.*?)\s*$"
)

_HASH_ALGORITHMS = {
    "md5": "md5",
    "sha1": "sha1",
    "sha256": "sha256",
}


def parse_files_dump(output: str) -> dict[str, SourceFileRecord]:
    """Parse ``llvm-pdbutil dump -files`` output, keeping first-seen order."""
    records: dict[str, SourceFileRecord] = {}
    for line in output.splitlines():
        m = _FILE_LINE_RE.match(line)
        if m is None:
            continue
        path = m["path"]
        if path in records:
            continue
        kind = (m["kind"] or "").lower()
        algorithm = _HASH_ALGORITHMS.get(kind)
        checksum = bytes.fromhex(m["hex"]) if algorithm and m["hex"] else b""
        records[path] = SourceFileRecord(build_time_path=path, checksum=checksum, algorithm=algorithm)
    return records


def file_checksum(path: Path, algorithm: str) -> bytes:
    h = hashlib.new(algorithm)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            h.update(chunk)
    return h.digest()


def _matches_on_disk(record: SourceFileRecord) -> bool:
    local = Path(record.build_time_path)
    try:
        if not local.is_file():
            return False
        if record.algorithm and record.checksum:
            return file_checksum(local, record.algorithm) == record.checksum
    except OSError as e:
        logger.debug("Unable to read %s: %s", local, e)
        return False
    return True


class PdbUtilReader:
    """Scoped reader over one PDB file.

    Implements the ``SymbolReader`` protocol.  The dump runs once on
    ``__enter__`` and is discarded on ``__exit__``.
    """

    def __init__(self, pdb_path: str | Path, pdbutil_executable: str | None = None) -> None:
        self._pdb_path = Path(pdb_path)
        self._pdbutil = pdbutil_executable or get_pdbutil_executable()
        self._records: dict[str, SourceFileRecord] | None = None

    def __enter__(self) -> PdbUtilReader:
        self._records = self._load()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._records = None

    def _load(self) -> dict[str, SourceFileRecord]:
        if not self._pdb_path.is_file():
            raise SymbolFileError(f'PDB file "{self._pdb_path}" does not exist.')
        try:
            result = subprocess.run(
                [self._pdbutil, "dump", "-files", str(self._pdb_path)],
                check=False,
                capture_output=True,
                encoding="utf-8",
                errors="surrogateescape",
            )
        except FileNotFoundError as e:
            raise SymbolFileError(f'Unable to run "{self._pdbutil}": {e}') from e
        if result.returncode != 0:
            raise SymbolFileError(result.stderr.strip() or f"{self._pdbutil} exited with code {result.returncode}")
        records = parse_files_dump(result.stdout)
        logger.debug("Read %d source file(s) from %s", len(records), self._pdb_path)
        return records

    def _require_open(self) -> dict[str, SourceFileRecord]:
        if self._records is None:
            raise ValueError("PdbUtilReader must be used as a context manager.")
        return self._records

    def get_files_and_checksums(self) -> dict[str, SourceFileRecord]:
        return dict(self._require_open())

    def find_missing_or_changed_source_files(self) -> list[str]:
        return [path for path, record in self._require_open().items() if not _matches_on_disk(record)]
