"""Soko CLI — Typer-based command-line interface.

Provides the ``soko`` command with subcommands to push, pull, diff, list
and summarize artifacts.  All output uses Rich for formatted terminal
display.
"""
