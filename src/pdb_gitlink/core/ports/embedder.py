from pathlib import Path
from typing import Protocol


class SourceIndexEmbedder(Protocol):
    def embed(self, pdb_path: Path, srcsrv_path: Path) -> None: ...
