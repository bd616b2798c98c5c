"""Errors raised by the retention engine."""


class RetentionError(Exception):
    """Base exception for retention decisions."""


class ExtractionError(RetentionError):
    """Raised when a filename matches the timestamp pattern but cannot be parsed."""


class StateTransitionError(RetentionError):
    """Raised when a decided record would be moved to a different terminal state."""
