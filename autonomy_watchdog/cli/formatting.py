"""Display helpers shared by CLI commands."""

from __future__ import annotations

import logging

import typer
import yaml
from rich.markup import escape

from ..config import WatchdogConfig
from ..errors import WatchdogError
from .state import EXIT_USAGE, console
from .theme import THEME


def _markup(text: str, color: str) -> str:
    """Wrap text in Rich markup with the given color, escaping special chars."""
    return f"[{color}]{escape(text)}[/{color}]"


def print_error(message: str) -> None:
    console.print(_markup(message, THEME.error))


def format_age_seconds(age_ms: float | None) -> str:
    if age_ms is None:
        return "?"
    return f"{round(age_ms / 1000)}s"


def load_config(config_path: str | None) -> WatchdogConfig:
    """Load config for a command, exiting with a usage error on failure."""
    try:
        return WatchdogConfig.load(config_path)
    except (FileNotFoundError, WatchdogError) as exc:
        print_error(str(exc))
        raise typer.Exit(EXIT_USAGE) from exc
    except yaml.YAMLError as exc:
        print_error(f"Invalid YAML in watchdog config: {exc}")
        raise typer.Exit(EXIT_USAGE) from exc


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
