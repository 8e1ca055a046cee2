"""``soko list`` — show the artifacts held in the local store."""

from __future__ import annotations

import typer
from rich.table import Table

from soko.cli.runner import console, get_settings, run_async
from soko.core.listing import list_local_artifacts, time_ago
from soko.models.results import ArtifactListing
from soko.storage import build_local_provider


def list_cmd(ctx: typer.Context) -> None:
    """List the local artifacts by project, ID and tag."""
    settings = get_settings(ctx)

    async def _list() -> list[ArtifactListing]:
        return await list_local_artifacts(build_local_provider(settings))

    listings = run_async(settings, _list)

    if not listings:
        console.print("[dim]No artifacts found locally. Have you forgotten to pull?[/dim]")
        return

    table = Table(title="Local artifacts")
    table.add_column("Project", style="cyan")
    table.add_column("ID", style="green")
    table.add_column("Tag")
    table.add_column("Pull date", style="dim")
    for listing in listings:
        table.add_row(
            listing.project,
            listing.artifact_id,
            listing.tag or "",
            time_ago(listing.last_modified_at),
        )
    console.print(table)
