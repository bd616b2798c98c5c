"""Tests for actions applied to old files."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from oldfiles.actions import ActionExecutor


class _Recorder:
    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.commands: list[str] = []

    def __call__(self, command: str, **kwargs) -> subprocess.CompletedProcess[bytes]:
        self.commands.append(command)
        return subprocess.CompletedProcess(command, self.returncode, b"", b"")


def test_command_substitutes_path_and_allows_delete(tmp_path: Path) -> None:
    target = tmp_path / "old-2020-01-01.zip"
    target.write_text("x", encoding="utf-8")
    runner = _Recorder(returncode=0)

    outcome = ActionExecutor(execute="archive {} now", delete=True, runner=runner).apply(target)

    assert runner.commands == [f"archive {target} now"]
    assert outcome.command_ok
    assert outcome.deleted
    assert not target.exists()


def test_failing_command_suppresses_delete(tmp_path: Path) -> None:
    target = tmp_path / "old.zip"
    target.write_text("x", encoding="utf-8")

    outcome = ActionExecutor(execute="false {}", delete=True, runner=_Recorder(1)).apply(target)

    assert outcome.exit_code == 1
    assert not outcome.deleted
    assert outcome.error is None
    assert target.exists()


def test_missing_file_is_not_a_problem(tmp_path: Path) -> None:
    outcome = ActionExecutor(delete=True).apply(tmp_path / "gone.zip")

    assert outcome.error is None
    assert not outcome.deleted


def test_delete_failure_is_reported(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "stuck.zip"
    target.write_text("x", encoding="utf-8")

    def refuse(self: Path, missing_ok: bool = False) -> None:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "unlink", refuse)

    outcome = ActionExecutor(delete=True).apply(target)

    assert outcome.error is not None
    assert "could not delete file" in outcome.error


def test_real_shell_command_runs(tmp_path: Path) -> None:
    target = tmp_path / "old.log"
    target.write_text("x", encoding="utf-8")
    marker = tmp_path / "seen.txt"

    outcome = ActionExecutor(execute=f"cp {{}} {marker}").apply(target)

    assert outcome.exit_code == 0
    assert marker.exists()
    assert target.exists()


def test_disabled_executor() -> None:
    assert not ActionExecutor().enabled
    assert ActionExecutor(delete=True).enabled
