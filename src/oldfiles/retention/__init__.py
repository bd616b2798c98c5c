"""Retention decision engine."""

from .classifier import RetentionClassifier
from .errors import ExtractionError, RetentionError, StateTransitionError
from .grouping import Grouper, GroupingScope
from .models import Decoration, FileRecord, Group, State
from .spacing import ConstantSpacing, SpacingEntry, TableSpacing, parse_spacing
from .thinning import ThinningState, apply_spacing
from .timestamps import DEFAULT_PATTERN, TimestampExtractor, TimestampPattern

__all__ = [
    "ConstantSpacing",
    "DEFAULT_PATTERN",
    "Decoration",
    "ExtractionError",
    "FileRecord",
    "Group",
    "Grouper",
    "GroupingScope",
    "RetentionClassifier",
    "RetentionError",
    "SpacingEntry",
    "State",
    "StateTransitionError",
    "TableSpacing",
    "ThinningState",
    "TimestampExtractor",
    "TimestampPattern",
    "apply_spacing",
    "parse_spacing",
]
