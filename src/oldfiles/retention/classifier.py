"""Retention classification of a single group."""

from __future__ import annotations

import logging
import math
import re
from typing import Optional

from .models import Group, State
from .thinning import apply_spacing

LOGGER = logging.getLogger(__name__)


class RetentionClassifier:
    """Decide which records of a group are old.

    Max-age and always-keep rules are applied first; the always-keep pattern
    wins when both apply. The spacing pass then resolves whatever is left.
    """

    def __init__(
        self,
        *,
        max_age: float = math.inf,
        always_keep: Optional[re.Pattern[str]] = None,
    ) -> None:
        self.max_age = max_age
        self.always_keep = always_keep

    def seed(self, group: Group) -> Group:
        """Apply the max-age and always-keep rules to undecided records."""
        for record in group:
            if record.state.is_terminal:
                continue
            if self.always_keep is not None and self.always_keep.search(str(record.path)):
                record.decide(State.KEEP)
                record.always_keep = True
            elif record.age > self.max_age:
                record.decide(State.OLD)
        return group

    def classify(self, group: Group) -> Group:
        """Return ``group`` with every record in a terminal state."""
        self.seed(group)
        apply_spacing(group.records)
        LOGGER.debug(
            "Group %r: %d kept, %d old",
            group.key,
            sum(1 for record in group if record.state is State.KEEP),
            sum(1 for record in group if record.state is State.OLD),
        )
        return group


__all__ = ["RetentionClassifier"]
