import typer

from pdb_gitlink.cli.link import link
from pdb_gitlink.cli.providers import providers, show_url

app = typer.Typer(
    name="pdb-gitlink",
    help="pdb-gitlink: index PDB files against their git hosting provider.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("link")(link)
app.command("providers")(providers)
app.command("show-url")(show_url)


def main() -> None:
    app()
