"""Translate validated configuration into retention engine objects."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable, Optional

from oldfiles.config import ConfigError, OldFilesConfig
from oldfiles.retention import GroupingScope, TimestampPattern, parse_spacing


@dataclass(frozen=True, slots=True)
class RetentionRuntime:
    """Compiled settings for one run.

    Attributes:
        pattern: Validated timestamp pattern.
        spacing: Spacing function applied to every record.
        max_age: Age in days beyond which files are old.
        always_keep: Compiled always-keep path pattern.
        file_filter: Compiled pattern restricting analysed paths.
        scope: Grouping scope.
        recursive: Whether subdirectories are scanned.
        delete: Whether old files are deleted.
        execute: Command template run per old file.
    """

    pattern: TimestampPattern
    spacing: Callable[[float], float]
    max_age: float = math.inf
    always_keep: Optional[re.Pattern[str]] = None
    file_filter: Optional[re.Pattern[str]] = None
    scope: GroupingScope = GroupingScope.PER_ROOT
    recursive: bool = False
    delete: bool = False
    execute: Optional[str] = None


def _compile_path_pattern(value: str | None, label: str) -> Optional[re.Pattern[str]]:
    if value is None:
        return None
    try:
        return re.compile(value, re.IGNORECASE | re.DOTALL)
    except re.error as exc:
        raise ConfigError(f"The {label} pattern is not a valid regular expression: {exc}") from exc


def build_runtime(config: OldFilesConfig) -> RetentionRuntime:
    """Compile patterns and parse the spacing specification.

    Raises:
        ConfigError: If any pattern or the spacing specification is invalid.
    """
    retention = config.retention
    max_age = retention.max_age_days
    return RetentionRuntime(
        pattern=TimestampPattern.compile(config.timestamp.pattern),
        spacing=parse_spacing(retention.spacing),
        max_age=math.inf if max_age is None else max_age,
        always_keep=_compile_path_pattern(retention.always_keep, "always-keep"),
        file_filter=_compile_path_pattern(retention.filter, "filter"),
        scope=GroupingScope.UNIFIED if config.scanning.unify else GroupingScope.PER_ROOT,
        recursive=config.scanning.recursive,
        delete=config.actions.delete,
        execute=config.actions.execute,
    )


__all__ = ["RetentionRuntime", "build_runtime"]
