"""Per-session inspection: resolve the log, classify its tail, decide activity."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..sessions import SessionEntry
from .classifier import Classification, Status, age_ms, classify, is_active
from .records import Record
from .tail import read_last_record

LOG_SUFFIX = ".jsonl"


@dataclass(frozen=True)
class LastRecordInfo:
    """Resolved log path, last record and its classification for one session."""

    log_path: Path
    record: Record | None
    classification: Classification


@dataclass(frozen=True)
class SessionActivity:
    """Verdict plus diagnostic fields for a single session."""

    key: str
    kind: str | None
    session_id: str | None
    updated_at: Any
    age_ms: float | None
    status: Status
    reason: str
    log_path: Path | None
    active: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "kind": self.kind,
            "sessionId": self.session_id,
            "updatedAt": self.updated_at,
            "ageMs": self.age_ms,
            "lastRecordStatus": str(self.status),
            "lastRecordReason": self.reason,
            "jsonlPath": str(self.log_path) if self.log_path is not None else None,
            "active": self.active,
        }


def is_safe_session_id(session_id: str | None) -> bool:
    """A session id must name a file directly inside the sessions dir."""
    if not session_id or session_id in (".", ".."):
        return False
    return "/" not in session_id and "\\" not in session_id and "\x00" not in session_id


def session_log_path(sessions_dir: str | Path, session_id: str) -> Path:
    return Path(sessions_dir) / f"{session_id}{LOG_SUFFIX}"


def get_last_record_info(sessions_dir: str | Path, session_id: str) -> LastRecordInfo:
    """Read and classify the last record of ``<sessions_dir>/<session_id>.jsonl``."""
    log_path = session_log_path(sessions_dir, session_id)
    tail = read_last_record(log_path)
    if tail.reason == "missing":
        classification = classify(None, absent_reason="missing_jsonl")
    elif tail.record is None:
        classification = classify(None, absent_reason=tail.reason)
    else:
        classification = classify(tail.record)
    return LastRecordInfo(log_path=log_path, record=tail.record, classification=classification)


def check_session(
    session: SessionEntry,
    sessions_dir: str | Path | None,
    now_ms: float,
) -> SessionActivity:
    """Classify one session and compute its active/idle verdict.

    A session that can't be located on disk is still reported, as ``unknown``.
    """
    log_path: Path | None = None
    if not sessions_dir:
        classification = Classification(Status.UNKNOWN, "no_sessions_dir")
    elif not is_safe_session_id(session.session_id):
        classification = Classification(Status.UNKNOWN, "no_session_id")
    else:
        info = get_last_record_info(sessions_dir, session.session_id)
        classification = info.classification
        log_path = info.log_path

    return SessionActivity(
        key=session.key,
        kind=session.kind,
        session_id=session.session_id,
        updated_at=session.updated_at,
        age_ms=age_ms(session.updated_at, now_ms),
        status=classification.status,
        reason=classification.reason,
        log_path=log_path,
        active=is_active(session.updated_at, now_ms, classification.status),
    )
