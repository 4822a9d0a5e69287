"""Classify a session's last event and decide whether the session is active.

Policy (conservative):

- ``running`` (assistant waiting on a tool, or a tool result was the last
  event): active while ``updated_at`` is within 5 minutes.
- ``completed`` (assistant stopped normally): never active, however fresh.
- ``unknown`` (anything else, including an unreadable log): active only
  while ``updated_at`` is within 2 minutes.

Bad temporal input (missing, non-finite, or in the future) is never active.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum

from .records import MessageRecord, Record

MINUTE_MS = 60 * 1000
RUNNING_WINDOW_MS = 5 * MINUTE_MS
UNKNOWN_WINDOW_MS = 2 * MINUTE_MS

COMPLETION_STOP_REASONS = frozenset({"stop", "end"})


class Status(StrEnum):
    """Semantic class of a session's most recent event."""

    COMPLETED = "completed"
    RUNNING = "running"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Classification:
    status: Status
    reason: str


def classify(record: Record | None, *, absent_reason: str = "no_record") -> Classification:
    """Map the last record (or its absence) to a status and a debug reason."""
    if record is None:
        return Classification(Status.UNKNOWN, absent_reason)

    if not isinstance(record, MessageRecord):
        return Classification(Status.UNKNOWN, f"record_type:{record.kind or 'none'}")

    role = record.role
    stop_reason = record.stop_reason

    if role == "assistant" and stop_reason in COMPLETION_STOP_REASONS:
        return Classification(Status.COMPLETED, f"assistant_stopReason:{stop_reason}")
    if role == "assistant" and stop_reason == "toolUse":
        return Classification(Status.RUNNING, "assistant_waiting_tool")
    if role == "toolResult":
        return Classification(Status.RUNNING, "tool_result_last")

    return Classification(
        Status.UNKNOWN,
        f"message_role:{role or 'none'} stopReason:{stop_reason or 'none'}",
    )


def _as_ms(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return float(value)
    except OverflowError:
        return None


def age_ms(updated_at: object, now_ms: object) -> float | None:
    """``now_ms - updated_at``, or None when either side isn't a usable number."""
    updated = _as_ms(updated_at)
    now = _as_ms(now_ms)
    if updated is None or now is None:
        return None
    age = now - updated
    if not math.isfinite(age):
        return None
    return age


def is_active(updated_at: object, now_ms: object, status: Status | str) -> bool:
    """Return True if a session with this status and update time counts as active."""
    age = age_ms(updated_at, now_ms)
    if age is None or age < 0:
        return False

    if status == Status.RUNNING:
        return age <= RUNNING_WINDOW_MS
    if status == Status.COMPLETED:
        return False
    return age <= UNKNOWN_WINDOW_MS
