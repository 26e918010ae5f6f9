import logging
import subprocess
from pathlib import Path

from pdb_gitlink.config import get_pdbstr_executable
from pdb_gitlink.core.errors import EmbedError

logger = logging.getLogger(__name__)

SRCSRV_STREAM = "srcsrv"


class PdbStrEmbedder:
    """Write a srcsrv file into a PDB's ``srcsrv`` stream with ``pdbstr -w``.

    Implements the ``SourceIndexEmbedder`` protocol.
    """

    def __init__(self, pdbstr_executable: str | None = None) -> None:
        self._pdbstr = pdbstr_executable or get_pdbstr_executable()

    def command(self, pdb_path: Path, srcsrv_path: Path) -> list[str]:
        return [self._pdbstr, "-w", f"-p:{pdb_path}", f"-i:{srcsrv_path}", f"-s:{SRCSRV_STREAM}"]

    def embed(self, pdb_path: Path, srcsrv_path: Path) -> None:
        cmd = self.command(pdb_path, srcsrv_path)
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, check=False, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise EmbedError(f'Unable to run "{self._pdbstr}": {e}') from e
        if result.returncode != 0:
            diagnostic = (result.stderr or result.stdout).strip()
            raise EmbedError(diagnostic or f"{self._pdbstr} exited with code {result.returncode}")
