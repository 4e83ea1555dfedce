"""The sync command."""

from __future__ import annotations

import os
from pathlib import Path

import click

from .._exclude import ExcludeFilter, normalize_path, resolve_skip_dirs
from ..exceptions import DiffError
from ..sync import ActionKind, sync_tree, sync_tree_dry_run
from ._helpers import (
    main,
    _ProgressPrinter,
    _echo_failures,
    _echo_warnings,
    _status,
)

_ACTION_PREFIX = {
    ActionKind.MKDIR: "+",
    ActionKind.ADD: "+",
    ActionKind.UPDATE: "~",
}


@main.command()
@click.argument("source", type=click.Path(path_type=Path))
@click.argument("target", type=click.Path(path_type=Path))
@click.option("--skip-dir", "skip_dirs", multiple=True, type=click.Path(path_type=Path),
              help="Directory to skip, absolute or relative to SOURCE (repeatable).")
@click.option("--exclude", multiple=True,
              help="Exclude source paths matching pattern (gitignore syntax, repeatable).")
@click.option("--exclude-from", "exclude_from", envvar="TREESYNC_EXCLUDE_FROM",
              type=click.Path(exists=True, dir_okay=False),
              help="Read exclude patterns from file (or set TREESYNC_EXCLUDE_FROM).")
@click.option("--gitignore", "use_gitignore", is_flag=True, default=False,
              help="Read .gitignore files from the source tree.")
@click.option("-n", "--dry-run", is_flag=True, default=False,
              help="Show what would change without touching TARGET.")
@click.option("--preserve-times", is_flag=True, default=False,
              help="Copy source modification times onto copied files.")
@click.option("--no-progress", is_flag=True, default=False,
              help="Do not print percentage progress lines.")
@click.pass_context
def sync(ctx, source, target, skip_dirs, exclude, exclude_from, use_gitignore,
         dry_run, preserve_times, no_progress):
    """Update TARGET from SOURCE based on modification times.

    Files missing from TARGET, or older there than in SOURCE, are copied;
    missing subdirectories are created. Files and directories that exist
    only in TARGET are left alone.

    \b
    Relative paths are taken from the current directory:
        treesync sync ./src ./dst
        treesync sync ./src ./dst --skip-dir node_modules --skip-dir .git
    """
    # Relative SOURCE/TARGET are resolved against the working directory.
    source = normalize_path(source)
    target = normalize_path(target)
    if not source.is_dir():
        raise click.ClickException(f"Source {source} is not a directory")
    if not target.is_dir():
        raise click.ClickException(f"Target {target} is not a directory")

    click.echo(f"Source dir: {source}")
    click.echo(f"Target dir: {target}")

    skipped = resolve_skip_dirs(source, skip_dirs)
    if skipped:
        click.echo("Directories to skip:")
        for directory in sorted(skipped):
            click.echo(f"    {directory}")
    else:
        click.echo("No directories to skip")

    excl = None
    if exclude or exclude_from or use_gitignore:
        excl = ExcludeFilter(patterns=exclude, exclude_from=exclude_from,
                             gitignore=use_gitignore)

    try:
        if dry_run:
            report = sync_tree_dry_run(source, target, skip_dirs=skipped,
                                       exclude=excl)
            _echo_warnings(report)
            for action in report.actions():
                suffix = os.sep if action.action is ActionKind.MKDIR else ""
                click.echo(f"{_ACTION_PREFIX[action.action]} {action.path}{suffix}")
            if report.in_sync:
                _status(ctx, "Already in sync")
            return

        report = sync_tree(
            source, target,
            skip_dirs=skipped, exclude=excl,
            progress=_ProgressPrinter(ctx, show=not no_progress),
            preserve_times=preserve_times,
        )
    except DiffError as exc:
        raise click.ClickException(
            f"Files and directories could not be compared: {exc}"
        )

    _echo_warnings(report)
    _echo_failures(report)
    _status(ctx, f"Synced {len(report.created)} directories, "
                 f"{len(report.copied)} files -> {target}")
    if not report.ok:
        ctx.exit(1)
