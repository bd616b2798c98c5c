"""End-to-end tests for the retention pipeline."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from oldfiles.config import OldFilesConfig, resolve_with_precedence
from oldfiles.pipeline import RetentionPipeline
from oldfiles.retention import State
from oldfiles.runtime import build_runtime

NOW = datetime(2024, 1, 31, 12, 0, 0)


def _runtime(**overrides):
    config = resolve_with_precedence(defaults=OldFilesConfig(), cli_overrides=overrides)
    return build_runtime(config)


def _touch(directory: Path, *names: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_text(name, encoding="utf-8")


def _states(result) -> dict[str, State]:
    return {record.name: record.state for group in result.groups for record in group}


def test_pipeline_thins_and_deletes(tmp_path: Path) -> None:
    _touch(
        tmp_path,
        "db-2024-01-10.sql",
        "db-2024-01-07.sql",
        "db-2024-01-05.sql",
        "db-2024-01-02.sql",
        "notes.txt",
    )
    runtime = _runtime(**{"retention.spacing": "fixed:10", "actions.delete": True})

    result = RetentionPipeline(runtime, now=NOW).run([tmp_path])

    assert _states(result) == {
        "db-2024-01-10.sql": State.KEEP,
        "db-2024-01-07.sql": State.OLD,
        "db-2024-01-05.sql": State.OLD,
        "db-2024-01-02.sql": State.KEEP,
    }
    assert not (tmp_path / "db-2024-01-07.sql").exists()
    assert (tmp_path / "db-2024-01-02.sql").exists()
    assert result.counts["deleted"] == 2
    assert not result.had_problems


def test_extraction_errors_are_problems_but_run_continues(tmp_path: Path) -> None:
    _touch(tmp_path, "a-2023-02-30.tar", "a-2023-02-01.tar")

    result = RetentionPipeline(_runtime(), now=NOW).run([tmp_path])

    assert result.had_problems
    assert "could not parse" in result.problems[0]
    assert _states(result) == {"a-2023-02-01.tar": State.KEEP}


def test_per_root_scope_groups_each_directory_separately(tmp_path: Path) -> None:
    _touch(tmp_path / "one", "x-2024-01-01.bak")
    _touch(tmp_path / "two", "x-2024-01-02.bak")
    runtime = _runtime(**{"retention.spacing": "fixed:100", "scanning.recursive": True})

    result = RetentionPipeline(runtime, now=NOW).run([tmp_path])

    assert [len(group) for group in result.groups] == [1, 1]


def test_unified_scope_groups_across_roots(tmp_path: Path) -> None:
    _touch(tmp_path / "one", "x-2024-01-01.bak", "x-2024-01-20.bak")
    _touch(tmp_path / "two", "x-2024-01-10.bak")
    runtime = _runtime(
        **{"retention.spacing": "fixed:100", "retention.max_age_days": 25, "scanning.unify": True}
    )

    result = RetentionPipeline(runtime, now=NOW).run([tmp_path / "one", tmp_path / "two"])

    assert len(result.groups) == 1
    assert _states(result) == {
        "x-2024-01-20.bak": State.KEEP,
        "x-2024-01-10.bak": State.KEEP,
        "x-2024-01-01.bak": State.OLD,
    }


def test_reporter_sees_records_oldest_first(tmp_path: Path) -> None:
    _touch(tmp_path, "r-2024-01-05.log", "r-2024-01-25.log", "r-2024-01-15.log")

    class Collector:
        def __init__(self) -> None:
            self.seen: list[str] = []
            self.groups: list[str] = []

        def group(self, group) -> None:
            self.groups.append(group.key)

        def record(self, record) -> None:
            self.seen.append(record.name)

    collector = Collector()
    RetentionPipeline(_runtime(), now=NOW, reporter=collector).run([tmp_path])

    assert collector.groups == ["r-.log"]
    assert collector.seen == ["r-2024-01-05.log", "r-2024-01-15.log", "r-2024-01-25.log"]
