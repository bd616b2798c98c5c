"""Console rendering of retention decisions."""

from __future__ import annotations

import os

from rich.console import Console
from rich.text import Text

from oldfiles.retention import FileRecord, Group, State

DECORATION_STYLES = {"timestamp": "bold white", "group": "yellow"}
BASE_STYLE = "bright_black"


def render_name(record: FileRecord) -> Text:
    """Render the record's path with its timestamp and grouping spans highlighted."""
    text = Text(str(record.path.parent) + os.sep, style=BASE_STYLE)
    offset = len(text)
    text.append(record.name, style=BASE_STYLE)
    for decoration in record.decorations:
        text.stylize(
            DECORATION_STYLES[decoration.tag],
            offset + decoration.start,
            offset + decoration.end,
        )
    return text


def render_verdict(record: FileRecord) -> Text:
    if record.always_keep:
        return Text("always-keep", style="cyan")
    if record.state is State.OLD:
        return Text("remove", style="red")
    return Text("keep", style="green")


def render_record(record: FileRecord) -> Text:
    """Return ``  <path>, <age> days old, <verdict>``."""
    line = Text("  ")
    line.append_text(render_name(record))
    line.append(f", {record.age:.1f} days old, ")
    line.append_text(render_verdict(record))
    return line


class ConsoleReporter:
    """Print group headers and decisions.

    Kept files and group headers are only shown in verbose mode; old files are
    always listed.
    """

    def __init__(self, console: Console, *, verbose: bool = False) -> None:
        self.console = console
        self.verbose = verbose

    def group(self, group: Group) -> None:
        if self.verbose:
            self.console.print(Text.assemble(("Group: ", "cyan"), group.key), soft_wrap=True)

    def record(self, record: FileRecord) -> None:
        if self.verbose or record.state is State.OLD:
            self.console.print(render_record(record), soft_wrap=True)


__all__ = ["ConsoleReporter", "render_name", "render_record", "render_verdict"]
