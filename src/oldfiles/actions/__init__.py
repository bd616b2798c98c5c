"""Actions applied to old files."""

from .executor import ActionExecutor, ActionOutcome

__all__ = ["ActionExecutor", "ActionOutcome"]
