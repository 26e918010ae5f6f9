from pathlib import Path

from pdb_gitlink.core.link import run_link
from pdb_gitlink.core.ports.reporter import Reporter
from pdb_gitlink.core.reporting import LoggingReporter
from pdb_gitlink.models import LinkOptions, LinkResult
from pdb_gitlink.pdbtools.pdbstr import PdbStrEmbedder
from pdb_gitlink.pdbtools.pdbutil import PdbUtilReader
from pdb_gitlink.scm.git import GitRepository


def link_pdb(
    pdb_path: str | Path,
    options: LinkOptions | None = None,
    reporter: Reporter | None = None,
) -> LinkResult:
    """Link *pdb_path* using ``llvm-pdbutil``, ``git`` and ``pdbstr``."""
    return run_link(
        pdb_path,
        options,
        reader_factory=PdbUtilReader,
        embedder=PdbStrEmbedder(),
        repository_factory=GitRepository,
        reporter=reporter or LoggingReporter(),
    )


def link(pdb_path: str | Path, options: LinkOptions | None = None, reporter: Reporter | None = None) -> bool:
    return link_pdb(pdb_path, options, reporter).success
