"""Actions applied to files deemed old."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

LOGGER = logging.getLogger(__name__)

PLACEHOLDER = "{}"

CommandRunner = Callable[..., "subprocess.CompletedProcess[bytes]"]


@dataclass(slots=True)
class ActionOutcome:
    """What happened to a single old file.

    Attributes:
        path: File the actions were applied to.
        command: Command that was run, if any.
        exit_code: Exit status of the command, if one was run.
        deleted: Whether the file was removed by this run.
        error: Problem description when deletion failed.
    """

    path: Path
    command: Optional[str] = None
    exit_code: Optional[int] = None
    deleted: bool = False
    error: Optional[str] = None

    @property
    def command_ok(self) -> bool:
        return self.command is None or self.exit_code == 0


class ActionExecutor:
    """Run the configured command and delete old files.

    Deletion only happens when the command (if any) exits with status 0.
    """

    def __init__(
        self,
        *,
        execute: Optional[str] = None,
        delete: bool = False,
        stream_output: bool = False,
        runner: CommandRunner = subprocess.run,
    ) -> None:
        self.execute = execute
        self.delete = delete
        self.stream_output = stream_output
        self._runner = runner

    @property
    def enabled(self) -> bool:
        return self.execute is not None or self.delete

    def apply(self, path: Path) -> ActionOutcome:
        """Apply the configured actions to ``path``.

        Args:
            path: Full path of a file deemed old.

        Returns:
            ActionOutcome: Command status, deletion result and any problem.
        """
        outcome = ActionOutcome(path=path)
        if self.execute is not None:
            outcome.command = self.execute.replace(PLACEHOLDER, str(path))
            outcome.exit_code = self._run(outcome.command)
            if outcome.exit_code != 0:
                LOGGER.info("%s: command exited with %s", path, outcome.exit_code)

        if self.delete and outcome.command_ok:
            try:
                path.unlink()
                outcome.deleted = True
            except FileNotFoundError:
                LOGGER.debug("%s: already absent", path)
            except OSError as exc:
                outcome.error = f"could not delete file: {path} ({exc.strerror or exc})"
        return outcome

    def _run(self, command: str) -> int:
        capture = not self.stream_output
        try:
            completed = self._runner(command, shell=True, capture_output=capture, check=False)
        except OSError as exc:
            LOGGER.warning("Failed to start command %r: %s", command, exc)
            return -1
        return completed.returncode


__all__ = ["ActionExecutor", "ActionOutcome", "PLACEHOLDER"]
