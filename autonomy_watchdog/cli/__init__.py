"""CLI package for autonomy-watchdog."""

from typing import Annotated

import typer
from dotenv import load_dotenv

load_dotenv()

from .formatting import configure_logging
from .state import EXIT_FLAGGED, EXIT_OK, EXIT_USAGE, app

# Import command modules so their @app.command() decorators register
from . import subagents as _subagents  # noqa: F401, E402
from . import workspace as _workspace  # noqa: F401, E402


@app.callback()
def _root(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug diagnostics"),
    ] = False,
) -> None:
    """Watchdog checks for autonomous agent workspaces."""
    configure_logging(verbose)


def cli() -> None:
    """CLI entrypoint."""
    app(prog_name="autonomy-watchdog")


__all__ = ["EXIT_FLAGGED", "EXIT_OK", "EXIT_USAGE", "app", "cli"]


if __name__ == "__main__":
    cli()
