"""High-level retention pipeline orchestration.

Scans the configured roots, extracts timestamped records, groups and
classifies them, reports each decision and applies the configured actions to
old files. Problems with individual files or directories are collected and
never abort the run.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, Protocol

from oldfiles.actions import ActionExecutor, ActionOutcome
from oldfiles.retention import (
    ExtractionError,
    FileRecord,
    Group,
    Grouper,
    RetentionClassifier,
    State,
    TimestampExtractor,
)
from oldfiles.runtime import RetentionRuntime
from oldfiles.scanning import DirectoryListing, DirectoryScanner

LOGGER = logging.getLogger(__name__)


class ProblemTracker:
    """Thread-safe collector of non-fatal problems."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._problems: list[str] = []

    def report(self, message: str) -> None:
        LOGGER.error(message)
        with self._lock:
            self._problems.append(message)

    @property
    def problems(self) -> list[str]:
        with self._lock:
            return list(self._problems)

    @property
    def had_problems(self) -> bool:
        with self._lock:
            return bool(self._problems)


class DecisionReporter(Protocol):
    """Receives decisions as they are made."""

    def group(self, group: Group) -> None: ...

    def record(self, record: FileRecord) -> None: ...


@dataclass(slots=True)
class RetentionResult:
    """Aggregated outcome of a run.

    Attributes:
        groups: Classified groups in processing order.
        outcomes: Actions applied to old files.
        problems: Non-fatal problems reported during the run.
    """

    groups: list[Group] = field(default_factory=list)
    outcomes: list[ActionOutcome] = field(default_factory=list)
    problems: list[str] = field(default_factory=list)

    @property
    def had_problems(self) -> bool:
        return bool(self.problems)

    @property
    def counts(self) -> dict[str, int]:
        records = [record for group in self.groups for record in group]
        return {
            "groups": len(self.groups),
            "files": len(records),
            "kept": sum(1 for record in records if record.state is State.KEEP),
            "old": sum(1 for record in records if record.state is State.OLD),
            "deleted": sum(1 for outcome in self.outcomes if outcome.deleted),
            "problems": len(self.problems),
        }


class RetentionPipeline:
    """Coordinate scanning, classification, reporting and actions."""

    def __init__(
        self,
        runtime: RetentionRuntime,
        *,
        now: datetime | None = None,
        tracker: ProblemTracker | None = None,
        reporter: DecisionReporter | None = None,
        executor: ActionExecutor | None = None,
    ) -> None:
        self.runtime = runtime
        # Captured once so every age in the run is measured from the same instant.
        self.now = now if now is not None else datetime.now()
        self.tracker = tracker or ProblemTracker()
        self.reporter = reporter
        self.executor = executor or ActionExecutor(execute=runtime.execute, delete=runtime.delete)
        self.scanner = DirectoryScanner(
            recursive=runtime.recursive,
            file_filter=runtime.file_filter,
            on_error=self.tracker.report,
        )
        self.extractor = TimestampExtractor(runtime.pattern)
        self.grouper = Grouper(runtime.scope)
        self.classifier = RetentionClassifier(
            max_age=runtime.max_age, always_keep=runtime.always_keep
        )

    def run(self, roots: Iterable[Path]) -> RetentionResult:
        """Process every root and return aggregated results."""
        result = RetentionResult()
        batches = [
            self._extract(listing) for root in roots for listing in self.scanner.scan(Path(root))
        ]
        for unit in self.grouper.scope_units(batches):
            for group in unit:
                self.classifier.classify(group)
                result.groups.append(group)
                result.outcomes.extend(self._process(group))
        result.problems = self.tracker.problems
        return result

    def _extract(self, listing: DirectoryListing) -> list[FileRecord]:
        records: list[FileRecord] = []
        for path in listing.files:
            try:
                record = self.extractor.extract(
                    path, now=self.now, spacing=self.runtime.spacing, root=listing.root
                )
            except ExtractionError as exc:
                self.tracker.report(str(exc))
                continue
            if record is not None:
                records.append(record)
        return records

    def _process(self, group: Group) -> list[ActionOutcome]:
        if self.reporter is not None:
            self.reporter.group(group)
        outcomes: list[ActionOutcome] = []
        for record in group.by_descending_age():
            if self.reporter is not None:
                self.reporter.record(record)
            if record.state is not State.OLD or not self.executor.enabled:
                continue
            outcome = self.executor.apply(record.path)
            if outcome.error is not None:
                self.tracker.report(outcome.error)
            outcomes.append(outcome)
        return outcomes


__all__ = ["DecisionReporter", "ProblemTracker", "RetentionPipeline", "RetentionResult"]
