"""Typed view of a single session event-log record.

Session logs are JSONL, one event per line. The records this package cares
about look like::

    {"type": "message", "message": {"role": "assistant", ...}, "stopReason": "toolUse"}

Everything else is kept as an ``OtherRecord`` carrying only its ``type``.
Role and stop reason are open strings: values we don't recognise are carried
through as data, never rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MessageRecord:
    """A ``type == "message"`` event."""

    role: str | None = None
    stop_reason: str | None = None


@dataclass(frozen=True)
class OtherRecord:
    """Any event whose ``type`` is not ``"message"``."""

    kind: str | None = None


Record = MessageRecord | OtherRecord


def _as_token(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def parse_record(data: dict[str, Any]) -> Record:
    """Build a record from one decoded JSON object."""
    kind = _as_token(data.get("type"))
    if kind != "message":
        return OtherRecord(kind=kind)

    message = data.get("message")
    if not isinstance(message, dict):
        message = {}

    stop_reason = _as_token(data.get("stopReason"))
    if stop_reason is None:
        stop_reason = _as_token(message.get("stopReason"))

    return MessageRecord(role=_as_token(message.get("role")), stop_reason=stop_reason)
