"""Spacing functions mapping a file age to the minimum gap between kept files.

Two shapes are supported:

* ``fixed:N`` keeps files at least ``N`` days apart regardless of age.
* ``list:[limit,value][limit,valueage]...`` is a table. For a given age the
  entry with the greatest ``limit`` not exceeding that age applies; its value
  is either used directly or, with the ``age`` suffix, multiplied by the age.
  Ages below every limit get a spacing of zero, so such files are never
  thinned out.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable, Sequence

from oldfiles.config.exceptions import ConfigError

_ENTRY_RE = re.compile(r"\[(?P<limit>[\d.]+),(?P<value>[\d.]+)(?P<rel>age)?\]", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ConstantSpacing:
    """Same spacing for every age."""

    days: float = 0.0

    def __call__(self, age: float) -> float:
        return self.days


@dataclass(frozen=True, slots=True)
class SpacingEntry:
    """A single row of a spacing table.

    Attributes:
        threshold: Minimum age (days) from which the entry applies.
        value: Spacing in days, or a factor of the age when ``relative``.
        relative: Whether ``value`` is multiplied by the age.
    """

    threshold: float
    value: float
    relative: bool = False

    def evaluate(self, age: float) -> float:
        return self.value * age if self.relative else self.value


class TableSpacing:
    """Spacing chosen from an age-threshold table."""

    __slots__ = ("entries", "_thresholds")

    def __init__(self, entries: Iterable[SpacingEntry]) -> None:
        self.entries: tuple[SpacingEntry, ...] = tuple(
            sorted(entries, key=lambda entry: entry.threshold)
        )
        self._thresholds = [entry.threshold for entry in self.entries]

    def __call__(self, age: float) -> float:
        index = bisect_right(self._thresholds, age)
        if index == 0:
            return 0.0
        return self.entries[index - 1].evaluate(age)

    def __repr__(self) -> str:
        return f"TableSpacing({list(self.entries)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TableSpacing):
            return NotImplemented
        return self.entries == other.entries


def parse_spacing(spec: str | None) -> ConstantSpacing | TableSpacing:
    """Parse a textual spacing specification.

    Args:
        spec: ``None`` for no spacing, ``fixed:N`` or ``list:[...]...``.

    Returns:
        ConstantSpacing | TableSpacing: The parsed spacing function.

    Raises:
        ConfigError: If the specification cannot be parsed.
    """
    if spec is None:
        return ConstantSpacing(0.0)

    text = spec.strip()
    lowered = text.lower()
    if lowered.startswith("fixed:"):
        value = text[len("fixed:") :].strip()
        try:
            return ConstantSpacing(float(value))
        except ValueError as exc:
            raise ConfigError(
                f"Cannot parse spacing {spec!r}: the fixed value should be a number."
            ) from exc

    if lowered.startswith("list:"):
        return TableSpacing(_parse_entries(spec, text[len("list:") :]))

    raise ConfigError(
        f"Cannot parse spacing {spec!r}: expected 'fixed:N' or 'list:[limit,value]...'."
    )


def _parse_entries(spec: str, body: str) -> Sequence[SpacingEntry]:
    entries: list[SpacingEntry] = []
    cursor = 0
    for match in _ENTRY_RE.finditer(body):
        if match.start() != cursor:
            raise ConfigError(
                f"Cannot parse spacing {spec!r}: extraneous characters "
                f"{body[cursor:match.start()]!r} in the list."
            )
        cursor = match.end()
        try:
            entries.append(
                SpacingEntry(
                    threshold=float(match.group("limit")),
                    value=float(match.group("value")),
                    relative=match.group("rel") is not None,
                )
            )
        except ValueError as exc:
            raise ConfigError(
                f"Cannot parse spacing {spec!r}: {match.group(0)!r} is not numeric."
            ) from exc
    if cursor != len(body):
        raise ConfigError(
            f"Cannot parse spacing {spec!r}: extraneous characters {body[cursor:]!r} in the list."
        )
    return entries


__all__ = ["ConstantSpacing", "SpacingEntry", "TableSpacing", "parse_spacing"]
