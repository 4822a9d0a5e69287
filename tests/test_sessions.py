"""Tests for session listing and subagent filtering."""

from __future__ import annotations

import json
import subprocess

import pytest

from autonomy_watchdog.errors import SessionListError
from autonomy_watchdog.sessions import (
    SessionEntry,
    is_subagent,
    list_sessions,
    parse_session_listing,
)


def test_parse_listing() -> None:
    listing = parse_session_listing(
        {
            "path": "/home/me/.openclaw/sessions/sessions.json",
            "sessions": [
                {"key": "agent:main:subagent:a", "kind": "direct", "sessionId": "a", "updatedAt": 5},
                {"key": "agent:main:main"},
                "not-a-dict",
            ],
        }
    )
    assert listing.sessions_dir == "/home/me/.openclaw/sessions"
    assert len(listing.sessions) == 2
    assert listing.sessions[0] == SessionEntry(
        key="agent:main:subagent:a", kind="direct", session_id="a", updated_at=5
    )
    assert listing.sessions[1].session_id is None


@pytest.mark.parametrize("payload", [None, [], {"sessions": "nope"}, {}])
def test_parse_listing_tolerates_bad_shapes(payload: object) -> None:
    listing = parse_session_listing(payload)
    assert listing.sessions == []
    assert listing.sessions_dir is None


def test_non_string_key_becomes_empty() -> None:
    entry = SessionEntry.from_dict({"key": 12, "sessionId": ""})
    assert entry.key == ""
    assert entry.session_id is None
    assert not is_subagent(entry)


def test_is_subagent() -> None:
    assert is_subagent(SessionEntry(key="agent:main:subagent:abc"))
    assert not is_subagent(SessionEntry(key="agent:main:main"))
    assert is_subagent(SessionEntry(key="x|worker|y"), marker="|worker|")


def _completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


def test_list_sessions_runs_command(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def fake_run(argv, **kwargs):
        calls.append(argv)
        return _completed(json.dumps({"path": "/tmp/s/sessions.json", "sessions": []}))

    monkeypatch.setattr("autonomy_watchdog.sessions.subprocess.run", fake_run)
    listing = list_sessions(15, command="gw")
    assert calls == [["gw", "sessions", "--json", "--active", "15"]]
    assert listing.sessions_dir == "/tmp/s"


def test_list_sessions_nonzero_exit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "autonomy_watchdog.sessions.subprocess.run",
        lambda argv, **kwargs: _completed(returncode=3, stderr="gateway down"),
    )
    with pytest.raises(SessionListError, match="gateway down"):
        list_sessions(10)


def test_list_sessions_invalid_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "autonomy_watchdog.sessions.subprocess.run",
        lambda argv, **kwargs: _completed("not json"),
    )
    with pytest.raises(SessionListError, match="invalid JSON"):
        list_sessions(10)


def test_list_sessions_missing_binary(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(argv, **kwargs):
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr("autonomy_watchdog.sessions.subprocess.run", fake_run)
    with pytest.raises(SessionListError, match="not found"):
        list_sessions(10, command="missing-gw")
