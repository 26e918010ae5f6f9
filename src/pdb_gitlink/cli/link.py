import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from pdb_gitlink.linker import link_pdb
from pdb_gitlink.models import LinkMethod, LinkOptions

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, show_time=False)],
        force=True,
    )


def link(
    pdb: Annotated[list[Path], typer.Argument(help="PDB file(s) to index.")],
    git_dir: Annotated[
        Path | None, typer.Option("--git-dir", "-d", help="Git working directory; discovered from sources if omitted.")
    ] = None,
    commit: Annotated[str | None, typer.Option("--commit", "-c", help="Commit to link to instead of HEAD.")] = None,
    url: Annotated[
        str | None,
        typer.Option(
            "--url",
            "-u",
            help="Remote URL or raw URL template with {revision} and {filename}; bypasses remote detection.",
        ),
    ] = None,
    skip_verify: Annotated[bool, typer.Option("--skip-verify", "-s", help="Skip source checksum verification.")] = False,
    method: Annotated[LinkMethod, typer.Option("--method", "-m", help="How the debugger downloads sources.")] = (
        LinkMethod.HTTP
    ),
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug output.")] = False,
) -> None:
    """Embed git source server information into PDB files."""
    _configure_logging(verbose)
    options = LinkOptions(
        git_working_directory=git_dir,
        commit_id=commit,
        git_remote_url=url,
        skip_verify=skip_verify,
        method=method,
    )

    failed: list[Path] = []
    for pdb_path in pdb:
        result = link_pdb(pdb_path, options)
        if result.success:
            console.print(f"[green]Linked[/green] {result.indexed}/{result.total} files: {pdb_path}", soft_wrap=True)
        else:
            console.print(f"[red]Failed[/red] {pdb_path}", soft_wrap=True)
            console.print(f"  {result.error}", markup=False, soft_wrap=True)
            failed.append(pdb_path)

    if failed:
        raise typer.Exit(1)
