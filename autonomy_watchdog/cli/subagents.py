"""Subagent sweep: report which subagent sessions are genuinely still working.

Sessions can be "recently updated" after they have already finished, so the
sweep classifies each session's last log event instead of trusting the
timestamp alone.

Exit codes: 0 when no subagent is active, 1 when at least one is, 2 when the
session listing could not be obtained.
"""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from typing import Annotated

import typer

from ..activity import SessionActivity, check_session
from ..errors import SessionListError
from ..sessions import is_subagent, list_sessions
from .formatting import _markup, format_age_seconds, load_config, print_error
from .state import EXIT_FLAGGED, EXIT_OK, EXIT_USAGE, app, console
from .theme import THEME


def _now_ms() -> float:
    return time.time() * 1000


def _describe(result: SessionActivity) -> str:
    return (
        f"{result.key} age={format_age_seconds(result.age_ms)} "
        f"last={result.status} ({result.reason})"
    )


@app.command()
def subagents(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Emit machine-readable JSON"),
    ] = False,
    active_minutes: Annotated[
        int | None,
        typer.Option(
            "--active-minutes",
            min=1,
            help="Only consider sessions updated within this many minutes",
        ),
    ] = None,
    config_path: Annotated[
        str | None,
        typer.Option("--config", "-c", help="Path to watchdog YAML config"),
    ] = None,
) -> None:
    """Check whether any subagent sessions are truly active."""
    config = load_config(config_path)
    minutes = active_minutes if active_minutes is not None else config.active_minutes

    try:
        listing = list_sessions(minutes, command=config.sessions_command)
    except SessionListError as exc:
        print_error(str(exc))
        raise typer.Exit(EXIT_USAGE) from exc

    now_ms = _now_ms()
    results = [
        check_session(s, listing.sessions_dir, now_ms)
        for s in listing.sessions
        if is_subagent(s, config.subagent_marker)
    ]
    active = [r for r in results if r.active]

    if json_output:
        payload = {
            "checkedAt": datetime.now(timezone.utc).isoformat(),
            "activeMinutes": minutes,
            "subagentsChecked": len(results),
            "activeSubagents": len(active),
            "results": [r.to_dict() for r in results],
        }
        typer.echo(json.dumps(payload, indent=2))
    elif not results:
        console.print("[dim]No subagent sessions found in recent sessions list.[/dim]")
    elif not active:
        console.print(
            _markup(f"No active subagents detected (checked {len(results)}).", THEME.success)
        )
        for r in results:
            console.print(f"- idle: {_markup(_describe(r), THEME.muted)}")
    else:
        console.print(
            _markup(f"ACTIVE subagents detected ({len(active)}/{len(results)}):", THEME.warning)
        )
        for r in active:
            console.print(f"- ACTIVE: {_markup(_describe(r), THEME.accent)}")

    raise typer.Exit(EXIT_FLAGGED if active else EXIT_OK)
