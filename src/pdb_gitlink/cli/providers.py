from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from pdb_gitlink.core.errors import ConfigurationError
from pdb_gitlink.core.index import FILENAME_TOKEN, REVISION_TOKEN, to_token_template
from pdb_gitlink.core.providers import DEFAULT_PROVIDERS, get_provider

console = Console()


def providers() -> None:
    """List the known git hosting providers."""
    table = Table(show_lines=False)
    table.add_column("name")
    table.add_column("description")
    for definition in DEFAULT_PROVIDERS:
        table.add_row(definition.name, definition.description)
    console.print(table)


def show_url(
    url: Annotated[str, typer.Argument(help="Remote URL or raw URL template.")],
) -> None:
    """Show the provider and raw URL template a remote URL resolves to."""
    provider = get_provider(url)
    if provider is None:
        console.print(f"[red]No provider recognises[/red] {url}", soft_wrap=True)
        raise typer.Exit(1)

    try:
        template = to_token_template(provider.raw_url)
    except ConfigurationError as e:
        console.print(str(e), style="red", markup=False, soft_wrap=True)
        raise typer.Exit(1) from e

    console.print(f"provider: [green]{provider.name}[/green]")
    console.print(
        "raw url:  " + template.replace(REVISION_TOKEN, "<revision>").replace(FILENAME_TOKEN, "<filename>"),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )
    for key, value in provider.extra_metadata.items():
        console.print(f"{key}={value}", markup=False, highlight=False, soft_wrap=True)
