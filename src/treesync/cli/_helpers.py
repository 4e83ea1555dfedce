"""Shared helpers, progress rendering, and the main CLI group."""

from __future__ import annotations

import click

from ..sync import Outcome, Phase, ProgressEvent, SyncReport


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


_PHASE_LABELS = {
    Phase.DIRECTORIES: ("Creating directories", "Directory created"),
    Phase.FILES: ("Copying files", "File copied"),
}


class _ProgressPrinter:
    """Progress callback: one ``\\r``-rewritten percentage line per phase."""

    def __init__(self, ctx, *, show: bool = True) -> None:
        self._ctx = ctx
        self._show = show

    def __call__(self, event: ProgressEvent) -> None:
        label, done = _PHASE_LABELS[event.phase]
        if event.outcome is Outcome.OK:
            _status(self._ctx, f"{done}: {event.path}")
        if self._show:
            click.echo(
                f"\r{label}: {event.percent:.2f}% ({event.index}/{event.total})",
                nl=event.index == event.total,
            )


def _echo_failures(report: SyncReport) -> None:
    """Print the failure summary: directories by target path, files by source path."""
    if report.failed_directories:
        click.echo("Failed to create directories:")
        for directory in report.failed_directories:
            click.echo(f"    {directory.path}")
    if report.failed_files:
        click.echo("Failed to copy files:")
        for item in report.failed_files:
            click.echo(f"    {item.source}")


def _echo_warnings(report: SyncReport) -> None:
    for w in report.warnings:
        click.echo(f"WARNING: {w.path}: {w.error}", err=True)


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.pass_context
def main(ctx, verbose):
    """treesync: one-way directory mirroring by modification time.

    Copies files from SOURCE whose target copy is missing or older, and
    creates missing subdirectories. Nothing in the target is deleted.

    \b
    Quick start:
      treesync sync ./photos /mnt/backup/photos
      treesync sync ./src ./dst --skip-dir cache --skip-dir build
      treesync sync ./src ./dst --exclude '*.tmp' --dry-run
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
