from pdb_gitlink.core.ports.reporter import Reporter
from pdb_gitlink.core.ports.symbols import SymbolReader


def find_changed_or_missing(reader: SymbolReader) -> list[str]:
    return list(reader.find_missing_or_changed_source_files())


def report_changed_or_missing(reader: SymbolReader, reporter: Reporter) -> list[str]:
    """Warn about every source file that is missing or changed since compilation.

    Advisory only: the result never aborts linking.
    """
    reporter.debug("Verifying pdb file")
    missing = find_changed_or_missing(reader)
    for path in missing:
        reporter.warning(f'File "{path}" missing or changed since the PDB was compiled.')
    return missing
