"""Greedy spacing-based thinning of a group.

Records are walked from the newest to the oldest. The newest eligible record
is always kept. Every later record is held back for one step: once the next
record is known, the held record is only kept if dropping it would leave a gap
between the last kept record and the next one that exceeds the spacing
required at either end. The last held record is kept since nothing follows it.

The lookahead is exact only when the spacing does not decrease with age. With
a non-monotonic spacing function the result may leave a gap wider than the
spacing required at one of its ends.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .models import FileRecord, State

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ThinningState:
    """Trailing references carried across the pass.

    Attributes:
        prev_keep: Most recently committed kept record.
        pending: Record whose decision waits for the next eligible record.
    """

    prev_keep: Optional[FileRecord] = None
    pending: Optional[FileRecord] = None


def apply_spacing(records: Iterable[FileRecord]) -> list[FileRecord]:
    """Resolve every undecided record to ``OLD`` or ``KEEP``.

    Records already marked ``OLD`` are ignored. Records already marked
    ``KEEP`` are never deferred and anchor the following gaps.

    Args:
        records: Records of a single group, in any order.

    Returns:
        list[FileRecord]: The records sorted by ascending age.
    """
    ordered = sorted(records, key=lambda record: record.age)
    state = ThinningState()

    for cur in ordered:
        if cur.state is State.OLD:
            continue

        if state.prev_keep is None:
            cur.decide(State.KEEP)
            state.prev_keep = cur
            continue

        if state.pending is not None:
            gap = cur.age - state.prev_keep.age
            if gap > state.prev_keep.required_spacing or gap > cur.required_spacing:
                state.pending.decide(State.KEEP)
                state.prev_keep = state.pending
            else:
                state.pending.decide(State.OLD)
                LOGGER.debug(
                    "%s: dropped, gap %.1f fits spacing", state.pending.path, gap
                )
            state.pending = None

        if cur.state is State.KEEP:
            state.prev_keep = cur
        else:
            state.pending = cur

    if state.pending is not None:
        state.pending.decide(State.KEEP)

    return ordered


__all__ = ["ThinningState", "apply_spacing"]
