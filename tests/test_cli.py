"""Tests for the autonomy-watchdog CLI commands."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from autonomy_watchdog.cli import app
from autonomy_watchdog.errors import SessionListError
from autonomy_watchdog.sessions import SessionEntry, SessionListing

NOW = 1_700_000_000_000
MINUTE = 60 * 1000

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in (
        "AUTONOMY_WATCHDOG_CONFIG",
        "AUTONOMY_WATCHDOG_ACTIVE_MINUTES",
        "AUTONOMY_WATCHDOG_SESSIONS_COMMAND",
        "AUTONOMY_WATCHDOG_QUEUE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("autonomy_watchdog.config.DEFAULT_CONFIG_FILE", tmp_path / "absent.yaml")
    monkeypatch.setattr("autonomy_watchdog.cli.subagents._now_ms", lambda: NOW)


def _fake_listing(monkeypatch: pytest.MonkeyPatch, sessions_dir: Path, *entries: SessionEntry):
    calls: list[tuple[int, str]] = []

    def fake_list_sessions(active_minutes: int, command: str = "openclaw") -> SessionListing:
        calls.append((active_minutes, command))
        return SessionListing(sessions=list(entries), store_path=str(sessions_dir / "sessions.json"))

    monkeypatch.setattr("autonomy_watchdog.cli.subagents.list_sessions", fake_list_sessions)
    return calls


def _write_log(sessions_dir: Path, session_id: str, record: dict) -> None:
    (sessions_dir / f"{session_id}.jsonl").write_text(json.dumps(record) + "\n", encoding="utf-8")


TOOL_USE = {"type": "message", "message": {"role": "assistant"}, "stopReason": "toolUse"}
STOP = {"type": "message", "message": {"role": "assistant"}, "stopReason": "stop"}


class TestSubagents:
    def test_no_subagents(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        _fake_listing(monkeypatch, tmp_path, SessionEntry(key="agent:main:main", session_id="m"))
        result = runner.invoke(app, ["subagents"])
        assert result.exit_code == 0
        assert "No subagent sessions found" in result.output

    def test_all_idle(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        _write_log(tmp_path, "done1", STOP)
        _fake_listing(
            monkeypatch,
            tmp_path,
            SessionEntry(key="agent:main:subagent:done1", session_id="done1", updated_at=NOW - MINUTE),
        )
        result = runner.invoke(app, ["subagents"])
        assert result.exit_code == 0
        assert "No active subagents detected (checked 1)." in result.output
        assert "idle:" in result.output
        assert "assistant_stopReason:stop" in result.output

    def test_active_subagent_exits_one(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        _write_log(tmp_path, "busy", TOOL_USE)
        _write_log(tmp_path, "done1", STOP)
        _fake_listing(
            monkeypatch,
            tmp_path,
            SessionEntry(key="agent:main:subagent:busy", session_id="busy", updated_at=NOW - 4 * MINUTE),
            SessionEntry(key="agent:main:subagent:done1", session_id="done1", updated_at=NOW - MINUTE),
        )
        result = runner.invoke(app, ["subagents"])
        assert result.exit_code == 1
        assert "ACTIVE subagents detected (1/2):" in result.output
        assert "agent:main:subagent:busy" in result.output
        assert "age=240s" in result.output
        assert "agent:main:subagent:done1" not in result.output

    def test_json_output(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        _write_log(tmp_path, "busy", TOOL_USE)
        calls = _fake_listing(
            monkeypatch,
            tmp_path,
            SessionEntry(
                key="agent:main:subagent:busy", kind="direct", session_id="busy", updated_at=NOW - 4 * MINUTE
            ),
            SessionEntry(key="agent:main:subagent:gone", session_id="gone", updated_at=NOW - 3 * MINUTE),
        )
        result = runner.invoke(app, ["subagents", "--json", "--active-minutes", "30"])
        assert result.exit_code == 1
        assert calls == [(30, "openclaw")]

        payload = json.loads(result.output)
        assert payload["activeMinutes"] == 30
        assert payload["subagentsChecked"] == 2
        assert payload["activeSubagents"] == 1
        busy, gone = payload["results"]
        assert busy["lastRecordStatus"] == "running"
        assert busy["active"] is True
        assert busy["ageMs"] == 4 * MINUTE
        assert busy["jsonlPath"] == str(tmp_path / "busy.jsonl")
        assert gone["lastRecordStatus"] == "unknown"
        assert gone["lastRecordReason"] == "missing_jsonl"
        assert gone["active"] is False

    def test_config_drives_defaults(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        config = tmp_path / "watchdog.yaml"
        config.write_text("active_minutes: 45\nsessions_command: gw\n", encoding="utf-8")
        calls = _fake_listing(monkeypatch, tmp_path)
        result = runner.invoke(app, ["subagents", "--config", str(config)])
        assert result.exit_code == 0
        assert calls == [(45, "gw")]

    def test_listing_failure_exits_two(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def boom(active_minutes: int, command: str = "openclaw") -> SessionListing:
            raise SessionListError("Session lister not found: openclaw")

        monkeypatch.setattr("autonomy_watchdog.cli.subagents.list_sessions", boom)
        result = runner.invoke(app, ["subagents"])
        assert result.exit_code == 2
        assert "Session lister not found" in result.output

    def test_bad_config_exits_two(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["subagents", "--config", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 2


class TestDirtyRepos:
    def test_usage_without_paths(self) -> None:
        result = runner.invoke(app, ["dirty-repos"])
        assert result.exit_code == 2
        assert "Usage" in result.output

    def test_missing_repo(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["dirty-repos", str(tmp_path / "nope")])
        assert result.exit_code == 2
        assert "missing or not a repo" in result.output

    def test_dirty_repo(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "r" / ".git").mkdir(parents=True)
        monkeypatch.setattr("autonomy_watchdog.repos.porcelain_changes", lambda repo: 3)
        result = runner.invoke(app, ["dirty-repos", str(tmp_path / "r")])
        assert result.exit_code == 1
        assert "DIRTY" in result.output
        assert "3 change(s)" in result.output

    def test_clean_repo(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "r" / ".git").mkdir(parents=True)
        monkeypatch.setattr("autonomy_watchdog.repos.porcelain_changes", lambda repo: 0)
        result = runner.invoke(app, ["dirty-repos", str(tmp_path / "r")])
        assert result.exit_code == 0
        assert "all clean" in result.output


class TestQueueCommands:
    def test_queue_with_high_priority(self, tmp_path: Path) -> None:
        queue = tmp_path / "QUEUE.md"
        queue.write_text("## Ready\n- [ ] [HIGH] ship it\n- [ ] tidy\n", encoding="utf-8")
        result = runner.invoke(app, ["queue", "--queue", str(queue)])
        assert result.exit_code == 1
        assert "CANNOT SKIP QUEUE" in result.output
        assert "ship it" in result.output

    def test_queue_clear(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["queue", "--queue", str(tmp_path / "QUEUE.md")])
        assert result.exit_code == 0
        assert "Queue is empty" in result.output

    def test_queue_path_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        queue = tmp_path / "Q.md"
        queue.write_text("## Ready\n- [ ] [CRITICAL] fire\n", encoding="utf-8")
        monkeypatch.setenv("AUTONOMY_WATCHDOG_QUEUE", str(queue))
        result = runner.invoke(app, ["queue"])
        assert result.exit_code == 1

    def test_freshness_fresh(self, tmp_path: Path) -> None:
        queue = tmp_path / "QUEUE.md"
        queue.write_text("Last updated: today\n", encoding="utf-8")
        result = runner.invoke(app, ["queue-freshness", "--queue", str(queue)])
        assert result.exit_code == 0
        assert "Queue is fresh" in result.output
        assert "today" in result.output

    def test_freshness_stale(self, tmp_path: Path) -> None:
        queue = tmp_path / "QUEUE.md"
        queue.write_text("- [ ] something\n", encoding="utf-8")
        os.utime(queue, (1_000_000, 1_000_000))
        result = runner.invoke(app, ["queue-freshness", "--queue", str(queue), "--max-age-hours", "12"])
        assert result.exit_code == 1
        assert "STALE" in result.output

    def test_freshness_missing(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["queue-freshness", "--queue", str(tmp_path / "QUEUE.md")])
        assert result.exit_code == 1

    def test_hygiene_ok(self, tmp_path: Path) -> None:
        queue = tmp_path / "QUEUE.md"
        queue.write_text("## 🔥 High Priority / Ready\n- [ ] open\n", encoding="utf-8")
        result = runner.invoke(app, ["queue-hygiene", "--queue", str(queue)])
        assert result.exit_code == 0
        assert "hygiene OK" in result.output

    def test_hygiene_failure(self, tmp_path: Path) -> None:
        queue = tmp_path / "QUEUE.md"
        queue.write_text("## 🔥 High Priority / Ready\n- [x] finished\n", encoding="utf-8")
        result = runner.invoke(app, ["queue-hygiene", "--queue", str(queue)])
        assert result.exit_code == 1
        assert "- [x] finished" in result.output

    def test_hygiene_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["queue-hygiene", "--queue", str(tmp_path / "QUEUE.md")])
        assert result.exit_code == 1
        assert "not found" in result.output
