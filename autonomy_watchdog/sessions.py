"""Session enumeration via the gateway's ``sessions --json`` command.

Output shape::

    {"path": "/home/me/.openclaw/agents/main/sessions/sessions.json",
     "sessions": [{"key": "agent:main:subagent:1a2b", "kind": "direct",
                   "sessionId": "1a2b...", "updatedAt": 1739999999999}, ...]}

Session logs live beside the store file as ``<sessionId>.jsonl``.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Any

from .errors import SessionListError

logger = logging.getLogger(__name__)

DEFAULT_SESSIONS_COMMAND = "openclaw"
SUBAGENT_MARKER = ":subagent:"
LIST_TIMEOUT_S = 30


@dataclass(frozen=True)
class SessionEntry:
    """One session as reported by the session lister."""

    key: str
    kind: str | None = None
    session_id: str | None = None
    updated_at: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionEntry:
        key = data.get("key")
        session_id = data.get("sessionId")
        kind = data.get("kind")
        return cls(
            key=key if isinstance(key, str) else "",
            kind=kind if isinstance(kind, str) else None,
            session_id=session_id if isinstance(session_id, str) and session_id else None,
            updated_at=data.get("updatedAt"),
        )


@dataclass(frozen=True)
class SessionListing:
    sessions: list[SessionEntry] = field(default_factory=list)
    store_path: str | None = None

    @property
    def sessions_dir(self) -> str | None:
        if not self.store_path:
            return None
        return os.path.dirname(self.store_path)


def parse_session_listing(payload: Any) -> SessionListing:
    """Build a listing from decoded ``sessions --json`` output, tolerating gaps."""
    if not isinstance(payload, dict):
        return SessionListing()
    raw_sessions = payload.get("sessions")
    if not isinstance(raw_sessions, list):
        raw_sessions = []
    store_path = payload.get("path")
    return SessionListing(
        sessions=[SessionEntry.from_dict(s) for s in raw_sessions if isinstance(s, dict)],
        store_path=store_path if isinstance(store_path, str) and store_path else None,
    )


def list_sessions(
    active_minutes: int,
    command: str = DEFAULT_SESSIONS_COMMAND,
) -> SessionListing:
    """Run ``<command> sessions --json --active N`` and parse its output."""
    argv = [command, "sessions", "--json", "--active", str(active_minutes)]
    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            timeout=LIST_TIMEOUT_S,
            check=False,
        )
    except FileNotFoundError as exc:
        raise SessionListError(f"Session lister not found: {command}") from exc
    except subprocess.TimeoutExpired as exc:
        raise SessionListError(f"Session lister timed out after {LIST_TIMEOUT_S}s") from exc

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise SessionListError(
            f"'{' '.join(argv)}' exited with {result.returncode}" + (f": {stderr}" if stderr else "")
        )

    try:
        payload = json.loads(result.stdout)
    except json.JSONDecodeError as exc:
        raise SessionListError(f"Session lister returned invalid JSON: {exc}") from exc

    listing = parse_session_listing(payload)
    logger.debug("Listed %d sessions from %s", len(listing.sessions), listing.store_path)
    return listing


def is_subagent(session: SessionEntry, marker: str = SUBAGENT_MARKER) -> bool:
    return marker in session.key
