"""Sync operations: diff, then create directories, then copy files."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Iterable

from ._apply import copy_files, create_directories
from ._types import (
    ApplyError,
    Outcome,
    ProgressCallback,
    ProgressEvent,
    SyncPlan,
    SyncReport,
)
from ._walk import diff_trees

if TYPE_CHECKING:
    from .._exclude import ExcludeFilter


def _report_warnings(plan: SyncPlan, report: SyncReport) -> None:
    for entry in plan.unsupported:
        report.warnings.append(ApplyError(
            path=str(entry.path), error=f"unsupported entry ({entry.reason})",
        ))


def sync_tree_dry_run(
    source: str | os.PathLike[str],
    target: str | os.PathLike[str],
    *,
    skip_dirs: Iterable[str | os.PathLike[str]] = (),
    exclude: ExcludeFilter | None = None,
) -> SyncReport:
    """Report what :func:`sync_tree` would do without touching *target*."""
    plan = diff_trees(source, target, skip_dirs, exclude=exclude)
    report = SyncReport(created=list(plan.directories), copied=list(plan.files))
    _report_warnings(plan, report)
    return report


def sync_tree(
    source: str | os.PathLike[str],
    target: str | os.PathLike[str],
    *,
    skip_dirs: Iterable[str | os.PathLike[str]] = (),
    exclude: ExcludeFilter | None = None,
    progress: ProgressCallback | None = None,
    preserve_times: bool = False,
) -> SyncReport:
    """Mirror *source* into *target* (one-way, newer wins, no deletes).

    The whole source tree is diffed first. If the diff fails, nothing is
    applied and :class:`~treesync.exceptions.DiffError` propagates. Then
    all planned directories are created, then all planned files copied.
    Item failures are collected in the returned report; a file copied into
    a directory that failed to be created is attempted anyway and fails on
    its own.

    Args:
        source: Source root directory.
        target: Target root directory.
        skip_dirs: Absolute source-side directories to leave out, as
            produced by :func:`~treesync.resolve_skip_dirs`.
        exclude: Optional pattern filter.
        progress: Called once per applied item.
        preserve_times: Copy source timestamps onto copied files.
    """
    plan = diff_trees(source, target, skip_dirs, exclude=exclude)
    report = SyncReport()
    _report_warnings(plan, report)

    def observe(event: ProgressEvent) -> None:
        if event.outcome is Outcome.FAILED:
            report.errors.append(ApplyError(
                path=str(event.path), error=event.error or "failed",
            ))
        if progress is not None:
            progress(event)

    failed_dirs = create_directories(plan.directories, progress=observe)
    failed_files = copy_files(plan.files, progress=observe,
                              preserve_times=preserve_times)

    report.failed_directories = failed_dirs
    report.failed_files = failed_files
    # Identity, not equality: plan items are unique objects.
    failed_ids = {id(item) for item in failed_dirs}
    failed_ids.update(id(item) for item in failed_files)
    report.created = [d for d in plan.directories if id(d) not in failed_ids]
    report.copied = [f for f in plan.files if id(f) not in failed_ids]
    return report
