"""Task queue checks over a markdown ``QUEUE.md`` backlog.

The queue is a markdown file with ``##`` sections (High Priority / Ready,
In Progress, Blocked, Done) holding ``- [ ]`` / ``- [x]`` task lines.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from .errors import QueueFileError

READY_SECTION_HEADER = "## 🔥 High Priority / Ready"

_READY_RE = re.compile(r"^##\s+(🔥|🔴)?\s*(High Priority|Ready)", re.IGNORECASE)
_IN_PROGRESS_RE = re.compile(r"^##\s+(🟡|⏳)?\s*(Medium Priority|In Progress)", re.IGNORECASE)
_BLOCKED_RE = re.compile(r"^##\s+(🔵|🚫)?\s*Blocked", re.IGNORECASE)
_DONE_RE = re.compile(r"^##\s+(✅|✔️)?\s*Done", re.IGNORECASE)
_TASK_RE = re.compile(r"^-\s*\[([ x])\]\s*(.*)$")
_LAST_UPDATED_RE = re.compile(r"Last updated:\s*(.+)", re.IGNORECASE)
_NEXT_SECTION_RE = re.compile(r"\n##\s+")
_COMPLETED_LINE_RE = re.compile(r"^- \[x\]", re.IGNORECASE)


class Priority(StrEnum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True)
class QueueTask:
    text: str
    priority: Priority
    raw: str


@dataclass
class QueueSections:
    """Open tasks grouped by queue section."""

    ready: list[QueueTask] = field(default_factory=list)
    in_progress: list[QueueTask] = field(default_factory=list)
    blocked: list[QueueTask] = field(default_factory=list)

    def ready_with(self, priority: Priority) -> list[QueueTask]:
        return [t for t in self.ready if t.priority == priority]

    @property
    def has_urgent_work(self) -> bool:
        return any(t.priority in (Priority.CRITICAL, Priority.HIGH) for t in self.ready)

    @property
    def top_task(self) -> QueueTask | None:
        for priority in (Priority.CRITICAL, Priority.HIGH):
            tasks = self.ready_with(priority)
            if tasks:
                return tasks[0]
        return None


def detect_priority(task_text: str) -> Priority:
    """Infer a task's priority from inline markers."""
    upper = task_text.upper()

    if "[CRITICAL]" in upper or "🔥 CRITICAL" in upper or "URGENT:" in upper:
        return Priority.CRITICAL
    if "[HIGH]" in upper or "🔴 HIGH" in upper or "HIGH PRIORITY" in upper:
        return Priority.HIGH
    if (
        "[MEDIUM]" in upper
        or "🟡 MEDIUM" in upper
        or "MEDIUM PRIORITY" in upper
        or ("⭐" in upper and "MEDIUM" in upper)
    ):
        return Priority.MEDIUM
    if "[LOW]" in upper or "🟡 LOW" in upper or "LOW PRIORITY" in upper:
        return Priority.LOW

    if "FIX:" in upper or "BUG:" in upper or "BROKEN" in upper:
        return Priority.HIGH
    # Bold tasks are treated as important.
    if task_text.startswith("**"):
        return Priority.HIGH
    return Priority.MEDIUM


def parse_queue(text: str) -> QueueSections:
    """Collect unchecked tasks from the Ready, In Progress and Blocked sections."""
    sections = QueueSections()
    current: list[QueueTask] | None = None

    for line in text.split("\n"):
        trimmed = line.strip()

        if _READY_RE.match(trimmed):
            current = sections.ready
            continue
        if _IN_PROGRESS_RE.match(trimmed):
            current = sections.in_progress
            continue
        if _BLOCKED_RE.match(trimmed):
            current = sections.blocked
            continue
        if _DONE_RE.match(trimmed):
            current = None
            continue
        if trimmed.startswith("##"):
            # Unknown header, likely a subsection: keep the current section.
            continue

        if current is None or not trimmed.startswith("-"):
            continue
        match = _TASK_RE.match(trimmed)
        if not match or match.group(1) == "x":
            continue
        task_text = match.group(2)
        current.append(QueueTask(text=task_text, priority=detect_priority(task_text), raw=line))

    return sections


def load_queue(path: str | Path) -> QueueSections:
    """Parse the queue at ``path``; a missing file is an empty queue."""
    path = Path(path)
    if not path.exists():
        return QueueSections()
    return parse_queue(path.read_text(encoding="utf-8"))


@dataclass(frozen=True)
class QueueFreshness:
    age_hours: float
    header: str | None
    max_age_hours: float

    @property
    def stale(self) -> bool:
        return self.age_hours > self.max_age_hours


def queue_freshness(
    path: str | Path,
    max_age_hours: float,
    now: float | None = None,
) -> QueueFreshness:
    """Report how long ago the queue file was modified.

    ``now`` is epoch seconds; defaults to the current time.
    """
    path = Path(path)
    if not path.exists():
        raise QueueFileError(f"{path} does not exist! Create it.")

    mtime = path.stat().st_mtime
    current = time.time() if now is None else now
    match = _LAST_UPDATED_RE.search(path.read_text(encoding="utf-8"))
    return QueueFreshness(
        age_hours=(current - mtime) / 3600,
        header=match.group(1).strip() if match else None,
        max_age_hours=max_age_hours,
    )


def completed_in_ready(text: str) -> list[str]:
    """Return completed (``- [x]``) lines left inside the Ready section."""
    start = text.find(READY_SECTION_HEADER)
    if start == -1:
        raise QueueFileError(f"Could not find section header: {READY_SECTION_HEADER}")

    body_start = start + len(READY_SECTION_HEADER)
    next_header = _NEXT_SECTION_RE.search(text, body_start)
    end = next_header.start() if next_header else len(text)

    ready = text[start:end]
    return [
        line.strip() for line in re.split(r"\r?\n", ready) if _COMPLETED_LINE_RE.match(line.strip())
    ]
