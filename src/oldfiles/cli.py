"""Command line interface for oldfiles."""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax

from oldfiles.actions import ActionExecutor
from oldfiles.config import (
    ConfigError,
    ConfigManager,
    OldFilesConfig,
    assign_nested,
    resolve_with_precedence,
)
from oldfiles.pipeline import RetentionPipeline
from oldfiles.reporting import ConsoleReporter
from oldfiles.runtime import build_runtime

console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    """Route log records through rich on stderr.

    Args:
        level: Logging level name from the configuration.
    """
    handler = RichHandler(console=err_console, show_time=False, show_path=False)
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _format_summary_line(metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for a run.

    Args:
        metrics: Ordered mapping of metric names to values.

    Returns:
        str: Rich-formatted summary string.
    """
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]Summary: {parts}.[/green]"


def _collect_overrides(
    *,
    file_filter: str | None,
    recursive: bool,
    unify: bool,
    max_age: float | None,
    spacing: str | None,
    timestamp: str | None,
    always_keep: str | None,
    delete: bool,
    execute: str | None,
) -> dict[str, Any]:
    """Translate explicitly supplied CLI options into dotted config overrides."""
    overrides: dict[str, Any] = {}
    values = {
        "retention.filter": file_filter,
        "retention.max_age_days": max_age,
        "retention.spacing": spacing,
        "retention.always_keep": always_keep,
        "timestamp.pattern": timestamp,
        "actions.execute": execute,
    }
    overrides.update({key: value for key, value in values.items() if value is not None})
    flags = {"scanning.recursive": recursive, "scanning.unify": unify, "actions.delete": delete}
    overrides.update({key: True for key, value in flags.items() if value})
    return overrides


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="oldfiles")
def cli() -> None:
    """Find old timestamped files that are safe to discard.

    Files whose names differ only by an embedded timestamp are grouped; within
    each group files older than a maximum age, or spaced more closely than the
    configured spacing, are deemed old.
    """


@cli.command()
@click.argument(
    "folders",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "-f",
    "--filter",
    "file_filter",
    help="Only analyse files whose paths match this regex.",
)
@click.option("-r", "--recursive", is_flag=True, help="Process subdirectories too.")
@click.option(
    "-u",
    "--unify",
    is_flag=True,
    help="Group files across all folders instead of per directory.",
)
@click.option(
    "-m",
    "--max-age",
    type=click.FloatRange(min=0),
    help="Files older than this many days are old.",
)
@click.option(
    "-s",
    "--spacing",
    help="Minimum spacing between kept files: 'fixed:DAYS' or "
    "'list:[limit,value][limit,valueage]...'.",
)
@click.option(
    "-t",
    "--timestamp",
    help="Timestamp regex with named groups y, m, d and optionally th, tm, ts, g.",
)
@click.option("-k", "--always-keep", help="Never deem files old whose paths match this regex.")
@click.option("-v", "--verbose", is_flag=True, help="List kept files, groups and command output.")
@click.option("-d", "--delete", is_flag=True, help="Delete files deemed old.")
@click.option(
    "-e",
    "--execute",
    help="Command run for each old file; '{}' is replaced by its path. With --delete, "
    "files are only deleted when the command exits with status 0.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Use an alternate configuration file.",
)
@click.pass_context
def run(
    ctx: click.Context,
    folders: tuple[Path, ...],
    file_filter: str | None,
    recursive: bool,
    unify: bool,
    max_age: float | None,
    spacing: str | None,
    timestamp: str | None,
    always_keep: str | None,
    verbose: bool,
    delete: bool,
    execute: str | None,
    config_path: Path | None,
) -> None:
    """Scan FOLDERS and report, and optionally act on, old files.

    Raises:
        click.ClickException: If configuration loading or validation fails.
    """
    overrides = _collect_overrides(
        file_filter=file_filter,
        recursive=recursive,
        unify=unify,
        max_age=max_age,
        spacing=spacing,
        timestamp=timestamp,
        always_keep=always_keep,
        delete=delete,
        execute=execute,
    )
    try:
        config = ConfigManager(config_path).load(cli_overrides=overrides, ensure_file=False)
        runtime = build_runtime(config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    verbose = verbose or config.cli.verbose_default
    _configure_logging("INFO" if verbose else config.logging.level)

    pipeline = RetentionPipeline(
        runtime,
        reporter=ConsoleReporter(console, verbose=verbose),
        executor=ActionExecutor(
            execute=runtime.execute, delete=runtime.delete, stream_output=verbose
        ),
    )
    result = pipeline.run(folders)

    if verbose:
        console.print(_format_summary_line(result.counts))
    if result.had_problems:
        console.print(
            "[red]Warning:[/red] some errors have occurred during this run. "
            "Please review the stderr output for details."
        )
        ctx.exit(1)


@cli.group()
def config() -> None:
    """Manage the oldfiles configuration file."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'retention.spacing'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    file_data = manager.load_file_overrides()
    try:
        assign_nested(file_data, segments, parsed_value)
        build_runtime(resolve_with_precedence(defaults=OldFilesConfig(), file_overrides=file_data))
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    if diff:
        console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
