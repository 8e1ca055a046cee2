"""Shared plumbing for CLI commands: logging setup and error reporting."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from soko.config import SokoSettings
from soko.core.errors import SokoError

T = TypeVar("T")

console = Console()
err_console = Console(stderr=True)


def configure_logging(settings: SokoSettings) -> None:
    """Route all log records through Rich at the configured level."""
    logging.basicConfig(
        level=settings.effective_log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=err_console,
                show_path=False,
                rich_tracebacks=settings.debug,
            )
        ],
        force=True,
    )


def get_settings(ctx: typer.Context) -> SokoSettings:
    """Settings built by the app callback, or fresh ones when called directly."""
    if isinstance(ctx.obj, SokoSettings):
        return ctx.obj
    return SokoSettings()


def run_async(settings: SokoSettings, operation: Callable[[], Coroutine[Any, Any, T]]) -> T:
    """Run ``operation`` on a fresh event loop and translate failures.

    Known ``SokoError`` failures print a concise message.  Anything else is
    reported with its traceback in debug mode, with a hint otherwise.
    Both exit with code 1.
    """
    try:
        return asyncio.run(operation())
    except SokoError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except Exception as exc:
        if settings.debug:
            err_console.print_exception()
        else:
            err_console.print(
                f"[bold red]An unexpected error occurred:[/bold red] {exc}\n"
                "[dim]For more information, run the same command with SOKO_DEBUG=true.[/dim]"
            )
        raise typer.Exit(code=1)
