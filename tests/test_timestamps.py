"""Tests for timestamp patterns and extraction."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from oldfiles.config import ConfigError
from oldfiles.retention import (
    ConstantSpacing,
    ExtractionError,
    TimestampExtractor,
    TimestampPattern,
)
from oldfiles.retention.timestamps import normalize_year, strip_spans

NOW = datetime(2024, 1, 1)


def _extract(name: str, pattern: str | None = None):
    extractor = TimestampExtractor(TimestampPattern.compile(pattern))
    return extractor.extract(Path("/backups") / name, now=NOW, spacing=ConstantSpacing(0))


def test_default_pattern_extracts_full_timestamp() -> None:
    record = _extract("backup-2023-04-05.12-30-00.zip")

    assert record is not None
    assert record.timestamp == datetime(2023, 4, 5, 12, 30, 0)
    assert record.group_key == "backup-.zip"


def test_default_pattern_accepts_compact_time() -> None:
    record = _extract("db 2023-12-31 2359.sql")

    assert record is not None
    assert record.timestamp == datetime(2023, 12, 31, 23, 59)
    assert record.group_key == "db .sql"


def test_date_only_name() -> None:
    record = _extract("notes-2022-02-28.txt")

    assert record is not None
    assert record.timestamp == datetime(2022, 2, 28)
    assert record.group_key == "notes-.txt"
    assert record.age == pytest.approx((NOW - datetime(2022, 2, 28)).days)


def test_name_without_timestamp_is_skipped() -> None:
    assert _extract("readme.txt") is None


def test_invalid_calendar_date_is_an_extraction_error() -> None:
    with pytest.raises(ExtractionError, match="could not parse the timestamp"):
        _extract("backup-2023-02-30.zip")


def test_partial_date_match_is_an_extraction_error() -> None:
    pattern = r"(?<y>\d{4})?-(?<m>\d\d)-(?<d>\d\d)"

    with pytest.raises(ExtractionError, match="not all of them"):
        _extract("log--04-05.txt", pattern)


def test_minutes_without_hours_is_an_extraction_error() -> None:
    pattern = r"(?<y>\d{4})(?<m>\d\d)(?<d>\d\d)(_(?<th>\d\d))?(m(?<tm>\d\d))?"

    with pytest.raises(ExtractionError, match="minutes but not hours"):
        _extract("dump-20230405m15.gz", pattern)


def test_pattern_without_date_groups_matches_nothing() -> None:
    pattern = r"(?<y>\d{4})?(?<m>\d\d)?(?<d>\d\d)?x"

    assert _extract("plainx.txt", pattern) is None


def test_two_digit_years_are_normalized() -> None:
    pattern = r"(?<y>\d\d)(?<m>\d\d)(?<d>\d\d)"

    assert _extract("snap-790101.tar", pattern).timestamp.year == 2079
    assert _extract("snap-800101.tar", pattern).timestamp.year == 1980
    assert normalize_year(5) == 2005
    assert normalize_year(1999) == 1999


def test_group_captures_define_key_in_match_order() -> None:
    pattern = r"(?<g>[a-z]+)_(?<y>\d{4})(?<m>\d\d)(?<d>\d\d)(?:\.(?<g>\w+))+"

    record = _extract("site_20230101.tar.gz", pattern)

    assert record is not None
    assert record.group_key == "sitetargz"
    tags = [(decoration.tag, decoration.start) for decoration in record.decorations]
    assert tags[0] == ("group", 0)
    assert ("timestamp", 5) in tags


def test_custom_pattern_is_case_insensitive() -> None:
    pattern = r"BK(?<y>\d{4})(?<m>\d\d)(?<d>\d\d)"

    record = _extract("bk20230101", pattern)

    assert record is not None
    assert record.group_key == "bk"


def test_decorations_cover_each_timestamp_component() -> None:
    record = _extract("backup-2023-04-05.12-30-00.zip")

    spans = [(d.start, d.end) for d in record.decorations if d.tag == "timestamp"]
    assert spans == [(7, 11), (12, 14), (15, 17), (18, 20), (21, 23), (24, 26)]


def test_strip_spans_keeps_text_between_components() -> None:
    assert strip_spans("a2023-log-04", [(1, 5), (10, 12)]) == "a-log-"
    assert strip_spans("x2023-01y", [(1, 5), (6, 8)]) == "xy"


@pytest.mark.parametrize(
    "pattern",
    [
        r"(?<y>\d{4",
        r"(?<y>\d{4})(?<m>\d\d)",
        r"(?<y>\d{4})(?<m>\d\d)(?<d>\d\d)(?<tm>\d\d)",
        r"(?<y>\d{4})(?<m>\d\d)(?<d>\d\d)(?<th>\d\d)(?<ts>\d\d)",
    ],
)
def test_invalid_patterns_raise_config_error(pattern: str) -> None:
    with pytest.raises(ConfigError):
        TimestampPattern.compile(pattern)
