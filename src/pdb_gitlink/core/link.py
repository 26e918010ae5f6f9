"""Link one PDB to its git history.

The pipeline runs read symbols -> locate repository -> select provider ->
normalize paths -> verify -> build index -> serialize -> embed, stopping at
the first fatal condition.  Every fatal condition is reported once through
the injected ``Reporter`` and turns into an unsuccessful ``LinkResult``.
"""

from __future__ import annotations

import ntpath
import posixpath
from collections.abc import Callable, Sequence
from pathlib import Path

from pdb_gitlink.core.errors import (
    ConfigurationError,
    DiscoveryError,
    LinkError,
    RepositoryNotFoundError,
)
from pdb_gitlink.core.index import REVISION_TOKEN, build_link_context
from pdb_gitlink.core.paths import GIT_DIR_NAME, find_git_dir, normalize_all
from pdb_gitlink.core.ports.embedder import SourceIndexEmbedder
from pdb_gitlink.core.ports.reporter import Reporter
from pdb_gitlink.core.ports.repository import Repository
from pdb_gitlink.core.ports.symbols import SymbolReader
from pdb_gitlink.core.providers import DEFAULT_PROVIDERS, Provider, ProviderDefinition, select_provider
from pdb_gitlink.core.srcsrv import write_srcsrv
from pdb_gitlink.core.verify import report_changed_or_missing
from pdb_gitlink.models import LinkContext, LinkOptions, LinkResult

ReaderFactory = Callable[[Path], SymbolReader]
RepositoryFactory = Callable[[Path], Repository]


class _LazyRepository:
    """Open the repository on first use and close it at most once."""

    def __init__(self, factory: RepositoryFactory, git_dir: Path) -> None:
        self._factory = factory
        self._git_dir = git_dir
        self._repository: Repository | None = None
        self._open_error: RepositoryNotFoundError | None = None
        self._closed = False

    def try_value(self) -> Repository | None:
        """Return the repository, or ``None`` when its metadata cannot be opened."""
        if self._repository is None and self._open_error is None:
            try:
                self._repository = self._factory(self._git_dir)
            except RepositoryNotFoundError as e:
                self._open_error = e
        return self._repository

    @property
    def value(self) -> Repository:
        repository = self.try_value()
        if repository is None:
            assert self._open_error is not None
            raise self._open_error
        return repository

    def close(self) -> None:
        if self._repository is not None and not self._closed:
            self._closed = True
            self._repository.close()


def srcsrv_path_for(pdb_path: Path) -> Path:
    return pdb_path.with_name(pdb_path.name + ".srcsrv")


def _containing_directory(path: str) -> str:
    if "\\" in path or ntpath.splitdrive(path)[0]:
        return ntpath.dirname(path)
    return posixpath.dirname(path)


def _locate_git_dir(options: LinkOptions, source_files: Sequence[str]) -> Path:
    if options.git_working_directory is not None:
        working_dir = Path(options.git_working_directory)
        if not working_dir.is_dir():
            raise ConfigurationError(f'Unable to find git repo at "{working_dir}".')
        return working_dir / GIT_DIR_NAME

    git_dir = find_git_dir(_containing_directory(source_files[0]))
    if git_dir is None:
        raise DiscoveryError("No source files found that are tracked in a git repo.")
    return git_dir


def _select_provider(
    options: LinkOptions,
    repository: _LazyRepository,
    providers: Sequence[ProviderDefinition],
) -> Provider:
    if options.git_remote_url is not None:
        candidates = [options.git_remote_url]
    else:
        candidates = repository.value.list_remotes()
    provider = select_provider(candidates, providers)
    if provider is None:
        raise DiscoveryError("Unable to detect the remote git service.")
    return provider


def _build_context(
    reader: SymbolReader,
    source_files: list[str],
    options: LinkOptions,
    repository_factory: RepositoryFactory,
    reporter: Reporter,
    providers: Sequence[ProviderDefinition],
) -> LinkContext:
    git_dir = _locate_git_dir(options, source_files)
    working_dir = git_dir.parent
    repository = _LazyRepository(repository_factory, git_dir)
    try:
        commit_id = options.commit_id or repository.value.head_commit_id()
        if not commit_id:
            raise DiscoveryError("No commit is checked out to HEAD. Have you committed yet?")

        provider = _select_provider(options, repository, providers)
        reporter.debug(f"Detected remote git service: {provider.name}")

        repo = repository.try_value()
        if repo is not None:
            paths = normalize_all(source_files, repo)
        else:
            reporter.warning(
                f'Unable to find git repo at "{working_dir}". '
                "Using file system to find canonical capitalization of file paths."
            )
            paths = normalize_all(source_files, working_dir)

        if not options.skip_verify:
            report_changed_or_missing(reader, reporter)

        context = build_link_context(provider, commit_id, paths, options.method)
        reporter.info(f"Using {context.raw_url.replace(REVISION_TOKEN, commit_id)} for source server URLs.")
        return context
    finally:
        repository.close()


def run_link(
    pdb_path: str | Path,
    options: LinkOptions | None = None,
    *,
    reader_factory: ReaderFactory,
    embedder: SourceIndexEmbedder,
    repository_factory: RepositoryFactory,
    reporter: Reporter,
    providers: Sequence[ProviderDefinition] = DEFAULT_PROVIDERS,
) -> LinkResult:
    """Index *pdb_path* against its git repository and embed the srcsrv stream.

    The symbol reader is closed before the embed step runs; the repository is
    opened only when needed and always closed.  The ``.srcsrv`` side-car file
    is left next to the PDB.
    """
    options = options or LinkOptions()
    pdb_path = Path(pdb_path)
    srcsrv_path = srcsrv_path_for(pdb_path)
    total = 0

    try:
        with reader_factory(pdb_path) as reader:
            source_files = list(reader.get_files_and_checksums())
            total = len(source_files)
            if not source_files:
                raise DiscoveryError(f'No source files found in pdb: "{pdb_path}".')
            context = _build_context(reader, source_files, options, repository_factory, reporter, providers)
            write_srcsrv(srcsrv_path, context)
    except LinkError as e:
        reporter.error(str(e))
        return LinkResult(success=False, total=total, error=str(e))

    indexed = len(context.indexed_paths)
    reporter.debug(f"Created source server link file, updating pdb file '{pdb_path}'")
    try:
        embedder.embed(pdb_path, srcsrv_path)
    except LinkError as e:
        reporter.error(str(e))
        return LinkResult(success=False, indexed=indexed, total=total, srcsrv_path=srcsrv_path, error=str(e))

    reporter.info(f'Remote git source information for {indexed}/{total} files written to pdb: "{pdb_path}"')
    return LinkResult(success=True, indexed=indexed, total=total, srcsrv_path=srcsrv_path)
