"""Timestamp extraction from filenames.

Patterns use named capture groups: ``y``, ``m`` and ``d`` are mandatory,
``th``, ``tm`` and ``ts`` are optional (minutes need hours, seconds need
minutes). Captures named ``g`` (or ``group``) define the grouping key; they
may appear several times in one pattern and may match repeatedly.

The third-party ``regex`` engine is used because it allows the same group name
in several alternation branches and keeps every capture of a repeated group.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import regex

from oldfiles.config.exceptions import ConfigError

from .errors import ExtractionError
from .models import Decoration, FileRecord

LOGGER = logging.getLogger(__name__)

DATE_GROUPS = ("y", "m", "d")
TIME_GROUPS = ("th", "tm", "ts")
TIMESTAMP_GROUPS = DATE_GROUPS + TIME_GROUPS
GROUPING_GROUPS = ("g", "group")

DEFAULT_PATTERN = r"""
    (?<y>\d\d\d\d)-(?<m>\d\d)-(?<d>\d\d)
    (
        (\.+(?<th>\d\d)-(?<tm>\d\d)(-(?<ts>\d\d))?)
      | (\s+(?<th>\d\d)(?<tm>\d\d)(?<ts>\d\d)?)
    )?
"""


class TimestampPattern:
    """A validated timestamp pattern."""

    __slots__ = ("source", "regex")

    def __init__(self, source: str, compiled: "regex.Pattern[str]") -> None:
        self.source = source
        self.regex = compiled

    @classmethod
    def compile(cls, source: str | None = None) -> "TimestampPattern":
        """Compile and validate a pattern, falling back to the default one.

        Raises:
            ConfigError: If the pattern is invalid or lacks the mandatory groups.
        """
        if source is None:
            compiled = regex.compile(DEFAULT_PATTERN, regex.DOTALL | regex.VERBOSE)
            return cls(DEFAULT_PATTERN, compiled)

        try:
            compiled = regex.compile(source, regex.IGNORECASE | regex.DOTALL)
        except regex.error as exc:
            raise ConfigError(
                f"Timestamp pattern is not a valid regular expression: {exc}"
            ) from exc

        names = set(compiled.groupindex)
        if not all(name in names for name in DATE_GROUPS):
            raise ConfigError(
                'The timestamp pattern must include the named groups "y", "m" and "d" '
                "for year, month and day."
            )
        if ("tm" in names and "th" not in names) or ("ts" in names and "tm" not in names):
            raise ConfigError(
                'The timestamp pattern may only include "tm" when "th" is present, '
                'and "ts" only when "tm" is present.'
            )
        return cls(source, compiled)

    def __repr__(self) -> str:
        return f"TimestampPattern({self.source!r})"

    def has_group(self, name: str) -> bool:
        return name in self.regex.groupindex


def normalize_year(year: int) -> int:
    """Expand two-digit years: 0-79 map to 20xx, 80-99 to 19xx."""
    if year < 100:
        return year + (2000 if year < 80 else 1900)
    return year


class TimestampExtractor:
    """Turn filenames into :class:`FileRecord` instances."""

    def __init__(self, pattern: TimestampPattern) -> None:
        self.pattern = pattern

    def extract(
        self,
        path: Path,
        *,
        now: datetime,
        spacing: Callable[[float], float],
        root: Optional[Path] = None,
    ) -> Optional[FileRecord]:
        """Extract a record from ``path``'s filename.

        Args:
            path: File whose name should carry a timestamp.
            now: Run-start instant used for ages.
            spacing: Spacing function attached to the record.
            root: Scan root the file was found under.

        Returns:
            FileRecord | None: The record, or ``None`` when the name does not
            carry a timestamp.

        Raises:
            ExtractionError: If the name matches only partially or the values
                do not form a valid date and time.
        """
        name = path.name
        match = self.pattern.regex.search(name)
        if match is None:
            return None

        spans = {key: self._last_span(match, key) for key in TIMESTAMP_GROUPS}
        present = {key for key, span in spans.items() if span is not None}

        date_present = [key for key in DATE_GROUPS if key in present]
        if not date_present:
            return None
        if len(date_present) != len(DATE_GROUPS):
            raise ExtractionError(
                f"{path}: the timestamp pattern matches a year, a month or a day, "
                "but not all of them."
            )
        if ("ts" in present and "tm" not in present) or ("tm" in present and "th" not in present):
            raise ExtractionError(
                f"{path}: the timestamp pattern matches seconds but not minutes, "
                "or minutes but not hours."
            )

        timestamp = self._build_timestamp(path, match, present)
        group_spans = self._grouping_spans(match)
        decorations = [
            Decoration(*spans[key], "timestamp") for key in TIMESTAMP_GROUPS if key in present
        ]
        decorations.extend(Decoration(start, end, "group") for start, end in group_spans)
        decorations.sort(key=lambda decoration: decoration.start)

        if group_spans:
            key = "".join(name[start:end] for start, end in group_spans)
        else:
            key = strip_spans(name, [span for span in spans.values() if span is not None])

        return FileRecord(
            path=path,
            name=name,
            timestamp=timestamp,
            group_key=key,
            now=now,
            spacing=spacing,
            decorations=tuple(decorations),
            root=root,
        )

    def _last_span(self, match: "regex.Match[str]", name: str) -> Optional[tuple[int, int]]:
        if not self.pattern.has_group(name):
            return None
        spans = match.spans(name)
        return spans[-1] if spans else None

    def _grouping_spans(self, match: "regex.Match[str]") -> list[tuple[int, int]]:
        spans: list[tuple[int, int]] = []
        for name in GROUPING_GROUPS:
            if self.pattern.has_group(name):
                spans.extend(match.spans(name))
        return sorted(spans)

    def _build_timestamp(
        self, path: Path, match: "regex.Match[str]", present: set[str]
    ) -> datetime:
        values = {key: match.group(key) if key in present else None for key in TIMESTAMP_GROUPS}
        try:
            year = normalize_year(int(values["y"]))
            fields = [
                int(values[key]) if values[key] is not None else 0
                for key in ("m", "d", *TIME_GROUPS)
            ]
            return datetime(year, *fields)
        except (TypeError, ValueError, OverflowError) as exc:
            time_text = ":".join(values[key] for key in TIME_GROUPS if values[key] is not None)
            described = f"y {values['y']}, m {values['m']}, d {values['d']}"
            if time_text:
                described += f", time {time_text}"
            raise ExtractionError(f"{path}: could not parse the timestamp ({described}).") from exc


def strip_spans(name: str, spans: list[tuple[int, int]]) -> str:
    """Remove ``spans`` from ``name``.

    Separator-only text (no letters or digits) lying between two removed spans
    is removed along with them, so ``backup-2023-04-05.zip`` becomes
    ``backup-.zip``.
    """
    ordered = sorted(spans)
    removed: list[tuple[int, int]] = []
    for start, end in ordered:
        if removed:
            prev_start, prev_end = removed[-1]
            between = name[prev_end:start]
            if start <= prev_end or not any(char.isalnum() for char in between):
                removed[-1] = (prev_start, max(prev_end, end))
                continue
        removed.append((start, end))

    pieces: list[str] = []
    cursor = 0
    for start, end in removed:
        pieces.append(name[cursor:start])
        cursor = end
    pieces.append(name[cursor:])
    return "".join(pieces)


__all__ = [
    "DEFAULT_PATTERN",
    "TimestampExtractor",
    "TimestampPattern",
    "normalize_year",
    "strip_spans",
]
