"""``soko summary`` and ``soko describe`` — build and show the release index."""

from __future__ import annotations

from pathlib import Path

import typer

from soko.cli.runner import console, get_settings, run_async
from soko.core.summary import SummaryBuilder, load_summary
from soko.models.artifacts import ContractKey
from soko.models.summary import ReleasesSummary
from soko.storage import build_local_provider


def summary_cmd(
    ctx: typer.Context,
    project: str | None = typer.Option(
        None,
        "--project",
        "-p",
        help="Only summarize this project (default: every local project).",
    ),
    filter_similar: bool | None = typer.Option(
        None,
        "--filter-similar/--keep-all",
        help="Drop semantic-version releases that did not change a contract.",
    ),
) -> None:
    """Generate the contract/release summary from the local releases."""
    settings = get_settings(ctx)
    if filter_similar is None:
        filter_similar = settings.filter_similar_contracts

    async def _generate() -> Path:
        builder = SummaryBuilder(
            build_local_provider(settings), filter_similar=filter_similar
        )
        return await builder.generate(project)

    path = run_async(settings, _generate)
    console.print(f"[green]Summary written to[/green] {path}")


def describe_cmd(ctx: typer.Context) -> None:
    """Describe the releases and their contracts from the generated summary."""
    settings = get_settings(ctx)

    async def _load() -> ReleasesSummary:
        return await load_summary(build_local_provider(settings))

    summary = run_async(settings, _load)

    if not summary.releases:
        console.print("[yellow]No releases found locally. Have you forgotten to pull?[/yellow]")
        return

    console.print("[bold]Available releases:[/bold]")
    for release, contracts in summary.releases.items():
        console.print(f" - [cyan]{release}[/cyan]")
        if not contracts:
            console.print(
                f"   [yellow]No new or updated contracts found for release {release}.[/yellow]"
            )
            continue
        for contract in contracts:
            key = ContractKey.parse(contract)
            console.print(f"   - {key.name} [dim]({key.path})[/dim]")
