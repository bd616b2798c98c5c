"""Shared fixtures for oldfiles tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

import pytest

from oldfiles.retention import ConstantSpacing, FileRecord, Group

NOW = datetime(2024, 6, 1, 12, 0, 0)

RecordFactory = Callable[..., FileRecord]


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_record() -> RecordFactory:
    """Return a factory building records of a given age in days."""

    def _make(
        age: float,
        *,
        spacing: Callable[[float], float] = ConstantSpacing(0.0),
        key: str = "backup-.zip",
        name: str | None = None,
    ) -> FileRecord:
        filename = name or f"backup-{age:g}.zip"
        return FileRecord(
            path=Path("/data") / filename,
            name=filename,
            timestamp=NOW - timedelta(days=age),
            group_key=key,
            now=NOW,
            spacing=spacing,
        )

    return _make


@pytest.fixture
def make_group(make_record: RecordFactory) -> Callable[..., Group]:
    def _make(ages: list[float], **kwargs) -> Group:
        return Group("backup-.zip", [make_record(age, **kwargs) for age in ages])

    return _make
