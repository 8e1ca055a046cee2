"""``soko diff PROJECT:TAG_OR_ID`` — compare a fresh compilation to a release."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from soko.cli.runner import console, get_settings, run_async
from soko.core.build_info import DEFAULT_BUILD_INFO_DIR
from soko.core.diff import Differencer
from soko.core.references import parse_reference
from soko.models.results import ContractDifference, DiffStatus
from soko.storage import build_local_provider

_STATUS_STYLES: dict[DiffStatus, str] = {
    DiffStatus.ADDED: "green",
    DiffStatus.REMOVED: "red",
    DiffStatus.CHANGED: "yellow",
}


def diff_cmd(
    ctx: typer.Context,
    reference: str = typer.Argument(
        ...,
        metavar="PROJECT:TAG_OR_ID",
        help="Local release to compare against.",
    ),
    artifact: Path = typer.Option(
        DEFAULT_BUILD_INFO_DIR,
        "--artifact",
        "-a",
        help="Build info file, or a folder holding exactly one build info file.",
    ),
) -> None:
    """Show the contracts added, removed or changed since a release."""
    settings = get_settings(ctx)

    async def _diff() -> list[ContractDifference]:
        ref = parse_reference(reference, require_artifact=True)
        return await Differencer(build_local_provider(settings)).diff_path(artifact, ref)

    differences = run_async(settings, _diff)

    if not differences:
        console.print(f"[green]No differences found with {reference}.[/green]")
        return

    table = Table(title=f"Differences with {reference}")
    table.add_column("Name", style="cyan")
    table.add_column("Path")
    table.add_column("Status")
    for difference in differences:
        style = _STATUS_STYLES[difference.status]
        table.add_row(
            difference.name,
            difference.path,
            f"[{style}]{difference.status.value}[/{style}]",
        )
    console.print(table)
