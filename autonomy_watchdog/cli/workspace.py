"""Workspace checks: dirty repos and task queue priority, freshness, hygiene."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..errors import QueueFileError
from ..queue import Priority, completed_in_ready, load_queue, queue_freshness
from ..repos import check_repos
from .formatting import _markup, load_config, print_error
from .state import EXIT_FLAGGED, EXIT_OK, EXIT_USAGE, app, console
from .theme import THEME

PREVIEW_CHARS = 80


@app.command("dirty-repos")
def dirty_repos(
    repos: Annotated[
        list[str] | None,
        typer.Argument(help="Repository paths to check"),
    ] = None,
) -> None:
    """Fail when any repository has uncommitted or untracked changes."""
    if not repos:
        print_error("Usage: autonomy-watchdog dirty-repos <repoPath> [repoPath2 ...]")
        raise typer.Exit(EXIT_USAGE)

    report = check_repos(repos)
    if report.missing:
        print_error(f"[dirty-repos] missing or not a repo: {', '.join(report.missing)}")
        raise typer.Exit(EXIT_USAGE)

    if report.dirty:
        console.print(_markup("[dirty-repos] DIRTY repos:", THEME.warning))
        for repo in report.dirty:
            console.print(f"- {_markup(repo.path, THEME.accent)} ({repo.changes} change(s))")
        raise typer.Exit(EXIT_FLAGGED)

    console.print(_markup("[dirty-repos] all clean", THEME.success))
    raise typer.Exit(EXIT_OK)


def _queue_path(queue: str | None, config_path: str | None) -> Path:
    if queue:
        return Path(queue)
    return Path(load_config(config_path).queue_path)


QueueOption = Annotated[
    str | None,
    typer.Option("--queue", "-q", help="Path to the queue file (default: tasks/QUEUE.md)"),
]
ConfigOption = Annotated[
    str | None,
    typer.Option("--config", "-c", help="Path to watchdog YAML config"),
]


@app.command("queue")
def queue_priority(
    queue: QueueOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Fail when HIGH or CRITICAL tasks are waiting in the Ready section."""
    sections = load_queue(_queue_path(queue, config_path))

    console.print("[bold]=== Queue Priority Check ===[/bold]\n")
    critical = sections.ready_with(Priority.CRITICAL)
    high = sections.ready_with(Priority.HIGH)
    medium = sections.ready_with(Priority.MEDIUM)
    low = sections.ready_with(Priority.LOW)

    if critical:
        console.print(_markup(f"CRITICAL tasks: {len(critical)}", THEME.error))
        for task in critical:
            console.print(f"   • {_markup(task.text[:PREVIEW_CHARS], THEME.error)}")
    if high:
        console.print(_markup(f"HIGH priority tasks: {len(high)}", THEME.error))
        for task in high:
            console.print(f"   • {_markup(task.text[:PREVIEW_CHARS], THEME.warning)}")
    if medium:
        console.print(_markup(f"MEDIUM priority tasks: {len(medium)}", THEME.warning))
    if low:
        console.print(_markup(f"LOW priority tasks: {len(low)}", THEME.success))
    if not sections.ready:
        console.print(_markup("Queue is empty - no ready tasks", THEME.success))

    top = sections.top_task
    if top is not None:
        console.print(_markup("CANNOT SKIP QUEUE", THEME.error))
        console.print("Top priority task:")
        console.print(_markup(top.text, THEME.accent))
        raise typer.Exit(EXIT_FLAGGED)

    console.print(_markup("Safe to continue: no HIGH/CRITICAL tasks in queue.", THEME.success))
    raise typer.Exit(EXIT_OK)


@app.command("queue-freshness")
def queue_freshness_cmd(
    queue: QueueOption = None,
    max_age_hours: Annotated[
        float | None,
        typer.Option("--max-age-hours", min=0.0, help="Maximum allowed queue age"),
    ] = None,
    config_path: ConfigOption = None,
) -> None:
    """Fail when the queue file has not been touched recently."""
    path = _queue_path(queue, config_path)
    limit = max_age_hours if max_age_hours is not None else load_config(config_path).queue_max_age_hours

    try:
        freshness = queue_freshness(path, limit)
    except QueueFileError as exc:
        print_error(str(exc))
        raise typer.Exit(EXIT_FLAGGED) from exc

    if freshness.stale:
        print_error(f"QUEUE IS STALE: last modified {freshness.age_hours:.1f} hours ago")
        if freshness.header:
            console.print(f'   Header says: "{freshness.header}"', markup=False)
        console.print(f"   Maximum allowed age: {limit:g} hours")
        raise typer.Exit(EXIT_FLAGGED)

    console.print(
        _markup(f"Queue is fresh (modified {freshness.age_hours:.1f} hours ago)", THEME.success)
    )
    if freshness.header:
        console.print(f'   Header: "{freshness.header}"', markup=False)
    raise typer.Exit(EXIT_OK)


@app.command("queue-hygiene")
def queue_hygiene(
    queue: QueueOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Fail when completed items linger in the High Priority / Ready section."""
    path = _queue_path(queue, config_path).resolve()
    if not path.exists():
        print_error(f"Queue file not found: {path}")
        raise typer.Exit(EXIT_FLAGGED)

    try:
        completed = completed_in_ready(path.read_text(encoding="utf-8"))
    except QueueFileError as exc:
        print_error(str(exc))
        raise typer.Exit(EXIT_FLAGGED) from exc

    if completed:
        print_error('QUEUE HYGIENE FAILURE: Completed tasks found in "High Priority / Ready".')
        console.print("Move these items to Recently Completed (or remove them):")
        for line in completed:
            console.print(f"  {line}", markup=False)
        raise typer.Exit(EXIT_FLAGGED)

    console.print(
        _markup("Queue hygiene OK: no completed items in High Priority / Ready.", THEME.success)
    )
    raise typer.Exit(EXIT_OK)
