"""Partition records into groups of timestamped variants."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

from .models import FileRecord, Group


class GroupingScope(str, Enum):
    """How far a group may reach across scanned directories."""

    PER_ROOT = "per-root"
    UNIFIED = "unified"


class Grouper:
    """Group records by their bare name within a scope unit."""

    def __init__(self, scope: GroupingScope = GroupingScope.PER_ROOT) -> None:
        self.scope = GroupingScope(scope)

    def partition(self, records: Iterable[FileRecord]) -> list[Group]:
        """Group records by key, keeping first-seen key order and record order."""
        buckets: dict[str, list[FileRecord]] = {}
        for record in records:
            buckets.setdefault(record.group_key, []).append(record)
        return [Group(key, members) for key, members in buckets.items()]

    def scope_units(self, batches: Sequence[Sequence[FileRecord]]) -> list[list[Group]]:
        """Partition each batch separately, or all batches together when unified.

        Args:
            batches: One batch of records per scanned directory.

        Returns:
            list[list[Group]]: The groups of each scope unit. Units without
            any record are omitted.
        """
        if self.scope is GroupingScope.UNIFIED:
            pooled = [record for batch in batches for record in batch]
            units = [pooled]
        else:
            units = [list(batch) for batch in batches]
        return [self.partition(unit) for unit in units if unit]


__all__ = ["Grouper", "GroupingScope"]
