"""Main Typer application — imports and registers all CLI commands.

Entry point: ``soko`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import typer

from soko.cli.commands.diff import diff_cmd
from soko.cli.commands.list_cmd import list_cmd
from soko.cli.commands.pull import pull_cmd
from soko.cli.commands.push import push_cmd
from soko.cli.commands.summary import describe_cmd, summary_cmd
from soko.cli.runner import configure_logging
from soko.config import SokoSettings

app = typer.Typer(
    name="soko",
    help="Soko: versioned, content-addressed storage for compiled contract artifacts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Show full tracebacks and debug logs (same as SOKO_DEBUG=true).",
    ),
) -> None:
    """Build the settings once and share them with the invoked command."""
    settings = SokoSettings(debug=True) if debug else SokoSettings()
    configure_logging(settings)
    ctx.obj = settings


# Register subcommands
app.command(name="push", help="Push a build info artifact to the remote storage.")(push_cmd)
app.command(name="pull", help="Pull missing artifacts from the remote storage.")(pull_cmd)
app.command(name="diff", help="Compare a fresh build info with a local release.")(diff_cmd)
app.command(name="list", help="List the artifacts held locally.")(list_cmd)
app.command(name="summary", help="Generate the contract/release summary.")(summary_cmd)
app.command(name="describe", help="Describe releases and their contracts.")(describe_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
