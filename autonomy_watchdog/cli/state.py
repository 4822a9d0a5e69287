"""Shared CLI state: console, app, exit codes."""

from __future__ import annotations

import typer
from rich.console import Console

# Exit codes shared by every check command
EXIT_OK = 0
EXIT_FLAGGED = 1
EXIT_USAGE = 2

# Rich console for all output
console = Console()

# Typer app
app = typer.Typer(
    name="autonomy-watchdog",
    help="Watchdog checks for autonomous agent workspaces.",
    epilog=(
        "Examples:\n"
        "  autonomy-watchdog subagents\n"
        "  autonomy-watchdog subagents --json --active-minutes 30\n"
        "  autonomy-watchdog dirty-repos ~/src/app ~/src/lib\n"
        "  autonomy-watchdog queue\n"
        "  autonomy-watchdog queue-freshness --max-age-hours 12"
    ),
    no_args_is_help=True,
    add_completion=False,
)
