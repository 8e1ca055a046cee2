"""``soko push PROJECT[:TAG]`` — publish a fresh build info.

Derives the artifact id from the build info content, uploads the artifact
under that id and, when a tag is given, points the tag at it.  An existing
tag is only moved with ``--force``.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.panel import Panel

from soko.cli.runner import console, get_settings, run_async
from soko.core.build_info import DEFAULT_BUILD_INFO_DIR
from soko.core.push import Publisher
from soko.core.references import parse_reference
from soko.storage import build_remote_provider


def push_cmd(
    ctx: typer.Context,
    reference: str = typer.Argument(
        ...,
        metavar="PROJECT[:TAG]",
        help="Project to push to, optionally with the tag to assign.",
    ),
    artifact: Path = typer.Option(
        DEFAULT_BUILD_INFO_DIR,
        "--artifact",
        "-a",
        help="Build info file, or a folder holding exactly one build info file.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Move the tag if it already exists on the storage.",
    ),
) -> None:
    """Push a compilation artifact to the remote storage."""
    settings = get_settings(ctx)

    async def _push() -> str:
        ref = parse_reference(reference)
        publisher = Publisher(build_remote_provider(settings))
        return await publisher.push(artifact, ref.project, ref.tag_or_id, force=force)

    artifact_id = run_async(settings, _push)
    project, _, tag = reference.partition(":")

    console.print(
        Panel(
            "\n".join([
                "[bold green]Artifact pushed![/bold green]",
                "",
                f"[bold]Project:[/bold] {project}",
                f"[bold]ID:[/bold]      {artifact_id}",
                f"[bold]Tag:[/bold]     {tag or '[dim]none[/dim]'}",
            ]),
            title="[bold]Soko[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
