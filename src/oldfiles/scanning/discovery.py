"""Directory listing with optional recursion."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class DirectoryListing:
    """Files found directly inside one directory.

    Attributes:
        directory: Directory that was listed.
        root: Scan root the directory belongs to.
        files: Files in the directory, sorted by name.
    """

    directory: Path
    root: Path
    files: list[Path] = field(default_factory=list)


class DirectoryScanner:
    """List candidate files directory by directory.

    A directory that cannot be listed is reported through ``on_error`` and
    skipped; its siblings and the remaining roots are still scanned.
    """

    def __init__(
        self,
        *,
        recursive: bool,
        file_filter: Optional[re.Pattern[str]] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.recursive = recursive
        self.file_filter = file_filter
        self.on_error = on_error

    def scan(self, root: Path) -> Iterator[DirectoryListing]:
        """Yield one listing per directory under ``root``, parents before children.

        Symlinked subdirectories are followed; a directory reached a second time
        through a link is skipped.
        """
        root = root.expanduser().resolve()
        if not root.is_dir():
            return
        pending = [root]
        visited: set[tuple[int, int]] = set()
        while pending:
            directory = pending.pop()
            try:
                status = directory.stat()
                if (status.st_dev, status.st_ino) in visited:
                    continue
                visited.add((status.st_dev, status.st_ino))
                files, subdirectories = self._list(directory)
            except PermissionError:
                self._report(f"not authorized to list directory contents: {directory}")
                continue
            except OSError as exc:
                self._report(f"{directory}: {exc.strerror or exc}")
                continue
            yield DirectoryListing(directory=directory, root=root, files=files)
            if self.recursive:
                pending.extend(reversed(subdirectories))

    def _list(self, directory: Path) -> tuple[list[Path], list[Path]]:
        files: list[Path] = []
        subdirectories: list[Path] = []
        with os.scandir(directory) as entries:
            for entry in sorted(entries, key=lambda item: item.name):
                path = Path(entry.path)
                if entry.is_dir():
                    subdirectories.append(path)
                elif entry.is_file():
                    if self.file_filter is None or self.file_filter.search(str(path)):
                        files.append(path)
        return files, subdirectories

    def _report(self, message: str) -> None:
        if self.on_error is None:
            LOGGER.warning(message)
        else:
            self.on_error(message)


__all__ = ["DirectoryListing", "DirectoryScanner"]
