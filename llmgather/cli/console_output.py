# llmgather/cli/console_output.py
"""
Handles printing progress and run statistics to the console (stderr) during
CLI execution.
"""
import logging as stdlib_logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

import click
import structlog
from rich.console import Console as RichConsole
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn

from llmgather.config.settings import PatternProfile
from llmgather.core.pipeline import ProgressCallback
from llmgather.core.results import GatherCounters
from llmgather.logging_setup import APP_LOGGER_NAME

log = structlog.get_logger(__name__)

STATISTICS_LABELS = (
    ("total_files_found", "Total files found"),
    ("processed_files", "Files processed (content included)"),
    ("skipped_files_include", "Skipped by include pattern"),
    ("skipped_files_size", "Skipped by size limit"),
    ("skipped_files_content", "Skipped by skip content pattern"),
    ("skipped_files_binary", "Skipped as binary"),
    ("read_errors", "Read errors"),
)


@contextmanager
def progress_reporter(disable: Optional[bool] = None) -> Iterator[ProgressCallback]:
    """Yields a progress callback backed by a transient rich bar on stderr."""
    if disable is None:
        app_log_level = stdlib_logging.getLogger(APP_LOGGER_NAME).getEffectiveLevel()
        disable = app_log_level > stdlib_logging.INFO or not sys.stderr.isatty()
    stderr_console = RichConsole(file=sys.stderr)

    with Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        transient=True,
        disable=disable,
        console=stderr_console,
    ) as progress:
        task_id = progress.add_task("starting...", total=1.0)

        def report(message: str, fraction: float) -> None:
            progress.update(task_id, completed=fraction, description=escape(message))

        yield report


def print_run_statistics(counters: GatherCounters, output_file: Optional[Path] = None):
    """Prints the final tallies of a run to stderr."""
    log.debug("console_statistics_output_requested")
    click.secho("--- gather summary ---", fg="cyan", err=True)
    if output_file is not None:
        click.echo(f"Summary written to: {output_file}", err=True)
    stats: Dict[str, int] = counters.as_dict()
    for key, label in STATISTICS_LABELS:
        if key == "read_errors" and not stats[key]:
            continue
        click.echo(f"{label}: {stats[key]}", err=True)


def print_profiles(profiles: Dict[str, PatternProfile], selected: str):
    for name, profile in profiles.items():
        marker = "*" if name == selected else " "
        click.echo(
            f"{marker} {name} (exclude: {len(profile.exclude_patterns)}, "
            f"skip content: {len(profile.skip_content_patterns)}, "
            f"include: {len(profile.include_patterns)})"
        )
