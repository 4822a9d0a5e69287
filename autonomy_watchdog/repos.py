"""Dirty-repo check: flag repositories with uncommitted or untracked changes."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirtyRepo:
    path: str
    changes: int


@dataclass
class RepoReport:
    dirty: list[DirtyRepo] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.dirty and not self.missing


def _is_git_repo(path: Path) -> bool:
    return (path / ".git").exists()


def porcelain_changes(repo: Path) -> int | None:
    """Count ``git status --porcelain`` entries, or None if git fails."""
    try:
        result = subprocess.run(
            ["git", "status", "--porcelain"],
            cwd=repo,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        logger.debug("git status failed in %s: %s", repo, exc)
        return None
    if result.returncode != 0:
        return None
    return len([line for line in result.stdout.splitlines() if line.strip()])


def check_repos(paths: list[str]) -> RepoReport:
    """Check each path; non-repos and git failures land in ``missing``."""
    report = RepoReport()
    for raw in paths:
        repo = Path(raw).resolve()
        if not repo.exists() or not _is_git_repo(repo):
            report.missing.append(raw)
            continue
        changes = porcelain_changes(repo)
        if changes is None:
            report.missing.append(raw)
        elif changes:
            report.dirty.append(DirtyRepo(path=raw, changes=changes))
    return report
