"""``soko pull PROJECT[:TAG_OR_ID]`` — download missing artifacts."""

from __future__ import annotations

import typer
from rich.table import Table

from soko.cli.runner import console, get_settings, run_async
from soko.core.pull import Synchronizer
from soko.core.references import parse_reference
from soko.models.results import PullResult
from soko.storage import build_local_provider, build_remote_provider


def _result_table(result: PullResult) -> Table:
    table = Table(title="Pull")
    table.add_column("Kind", style="cyan")
    table.add_column("Remote", justify="right")
    table.add_column("Pulled", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_row(
        "Tags",
        str(len(result.remote_tags)),
        str(len(result.pulled_tags)),
        str(len(result.failed_tags)),
    )
    table.add_row(
        "IDs",
        str(len(result.remote_ids)),
        str(len(result.pulled_ids)),
        str(len(result.failed_ids)),
    )
    return table


def pull_cmd(
    ctx: typer.Context,
    reference: str = typer.Argument(
        ...,
        metavar="PROJECT[:TAG_OR_ID]",
        help="Project to pull, optionally restricted to one tag or ID.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Download artifacts again even if they exist locally.",
    ),
) -> None:
    """Pull artifacts of a project from the remote storage."""
    settings = get_settings(ctx)

    async def _pull() -> PullResult:
        ref = parse_reference(reference)
        synchronizer = Synchronizer(
            build_local_provider(settings),
            build_remote_provider(settings),
            concurrency=settings.pull_concurrency,
        )
        return await synchronizer.pull(ref.project, ref.tag_or_id, force=force)

    result = run_async(settings, _pull)

    if not result.remote_tags and not result.remote_ids:
        console.print("[yellow]No artifacts found on the remote storage.[/yellow]")
        return

    pulled = result.pulled_tags + result.pulled_ids
    if not pulled and not result.has_failures:
        console.print("[green]You're up to date.[/green]")
        return

    console.print(_result_table(result))
    for name in result.failed_tags + result.failed_ids:
        console.print(f"  [red]- failed: {name}[/red]")
    if result.has_failures:
        raise typer.Exit(code=1)
