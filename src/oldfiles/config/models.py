"""Configuration models describing oldfiles settings."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OldFilesBaseModel(BaseModel):
    """Shared configuration for oldfiles Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class TimestampSettings(OldFilesBaseModel):
    """How timestamps are recognised in filenames.

    Attributes:
        pattern: Regular expression with named groups ``y``, ``m``, ``d`` and
            optionally ``th``, ``tm``, ``ts`` and ``g``. ``None`` selects the
            built-in pattern matching ``YYYY-MM-DD[.hh-mm[-ss]]`` and
            ``YYYY-MM-DD hhmm[ss]``.
    """

    pattern: Optional[str] = None


class RetentionSettings(OldFilesBaseModel):
    """Rules deciding which files are old.

    Attributes:
        max_age_days: Files older than this are old; ``None`` means unbounded.
        spacing: Spacing specification (``fixed:N`` or ``list:[limit,value]...``).
        always_keep: Regular expression over full paths of files never deemed old.
        filter: Regular expression restricting analysis to matching full paths.
    """

    max_age_days: Optional[float] = Field(default=None, ge=0)
    spacing: Optional[str] = None
    always_keep: Optional[str] = None
    filter: Optional[str] = None


class ScanningSettings(OldFilesBaseModel):
    """Directory traversal options.

    Attributes:
        recursive: Whether subdirectories are processed.
        unify: Whether files from every directory are grouped together.
    """

    recursive: bool = False
    unify: bool = False


class ActionSettings(OldFilesBaseModel):
    """What happens to old files.

    Attributes:
        delete: Whether old files are deleted.
        execute: Shell command run per old file; ``{}`` is replaced by the path.
    """

    delete: bool = False
    execute: Optional[str] = None


class LoggingSettings(OldFilesBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_case_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class CLIOptions(OldFilesBaseModel):
    """CLI behavior defaults.

    Attributes:
        verbose_default: Whether commands list kept files by default.
    """

    verbose_default: bool = False


class OldFilesConfig(OldFilesBaseModel):
    """Top-level configuration struct for oldfiles.

    Attributes:
        timestamp: Timestamp recognition settings.
        retention: Old-file rules.
        scanning: Directory traversal settings.
        actions: Actions applied to old files.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    timestamp: TimestampSettings = Field(default_factory=TimestampSettings)
    retention: RetentionSettings = Field(default_factory=RetentionSettings)
    scanning: ScanningSettings = Field(default_factory=ScanningSettings)
    actions: ActionSettings = Field(default_factory=ActionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "OldFilesBaseModel",
    "TimestampSettings",
    "RetentionSettings",
    "ScanningSettings",
    "ActionSettings",
    "LoggingSettings",
    "CLIOptions",
    "OldFilesConfig",
]
