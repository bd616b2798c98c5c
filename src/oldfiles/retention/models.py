"""Record and group models shared by the retention engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Iterator, Literal, Optional

from .errors import StateTransitionError

SECONDS_PER_DAY = 86_400.0


class State(str, Enum):
    """Retention state of a single file."""

    UNDECIDED = "undecided"
    OLD = "old"
    KEEP = "keep"

    @property
    def is_terminal(self) -> bool:
        return self is not State.UNDECIDED


@dataclass(frozen=True, slots=True)
class Decoration:
    """Span of a filename tagged for highlighting.

    Attributes:
        start: Index of the first character within the filename.
        end: Index one past the last character.
        tag: Either ``"timestamp"`` or ``"group"``.
    """

    start: int
    end: int
    tag: Literal["timestamp", "group"]


@dataclass(slots=True, eq=False)
class FileRecord:
    """A timestamped candidate file.

    Attributes:
        path: Full path of the file.
        name: Raw filename the timestamp was extracted from.
        timestamp: Point in time encoded in the filename.
        group_key: Bare name shared by all variants of the same file.
        now: Run-start instant used for every age computation.
        spacing: Function mapping an age to the required spacing in days.
        state: Current retention state.
        always_keep: Whether the always-keep pattern forced retention.
        decorations: Highlight spans within ``name``.
        root: Scan root the file was discovered under.
    """

    path: Path
    name: str
    timestamp: datetime
    group_key: str
    now: datetime
    spacing: Callable[[float], float]
    state: State = State.UNDECIDED
    always_keep: bool = False
    decorations: tuple[Decoration, ...] = ()
    root: Optional[Path] = None

    @property
    def age(self) -> float:
        """Age in fractional days; negative when the timestamp lies in the future."""
        return (self.now - self.timestamp).total_seconds() / SECONDS_PER_DAY

    @property
    def required_spacing(self) -> float:
        return self.spacing(self.age)

    def decide(self, state: State) -> None:
        """Move the record to a terminal state.

        Deciding the same state twice is a no-op; switching between terminal
        states is refused.

        Raises:
            StateTransitionError: If the record already holds another terminal state.
            ValueError: If ``state`` is not terminal.
        """
        if not state.is_terminal:
            raise ValueError("Records can only be moved to a terminal state.")
        if self.state is state:
            return
        if self.state.is_terminal:
            raise StateTransitionError(
                f"{self.path}: already decided as {self.state.value}, refusing {state.value}."
            )
        self.state = state


class Group:
    """Non-empty set of records sharing a grouping key within one scope unit."""

    __slots__ = ("key", "records")

    def __init__(self, key: str, records: Iterable[FileRecord]) -> None:
        self.key = key
        self.records = list(records)
        if not self.records:
            raise ValueError(f"Group {key!r} must contain at least one record.")

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __repr__(self) -> str:
        return f"Group(key={self.key!r}, records={len(self.records)})"

    def by_descending_age(self) -> list[FileRecord]:
        """Return records oldest first, ties in original order."""
        return sorted(self.records, key=lambda record: record.age, reverse=True)

    @property
    def undecided(self) -> list[FileRecord]:
        return [record for record in self.records if not record.state.is_terminal]


__all__ = ["Decoration", "FileRecord", "Group", "SECONDS_PER_DAY", "State"]
