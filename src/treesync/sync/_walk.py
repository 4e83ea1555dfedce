"""Recursive source-tree walk producing a :class:`SyncPlan`."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from .._exclude import normalize_path, path_key, skip_keys
from ..exceptions import DiffError, SymlinkLoopError
from ._compare import EntryKind, classify, compare_directory, compare_file
from ._types import SyncPlan, UnsupportedEntry

if TYPE_CHECKING:
    from .._exclude import ExcludeFilter


def diff_trees(
    source: str | os.PathLike[str],
    target: str | os.PathLike[str],
    excluded: Iterable[str | os.PathLike[str]] = (),
    *,
    exclude: ExcludeFilter | None = None,
) -> SyncPlan:
    """Compare *source* against *target* and return what must change.

    Nothing is modified. Directories missing at the target are listed
    parent-first; files are listed when the target is absent or has a
    strictly older modification time. Entries are visited depth-first in
    sorted name order.

    Args:
        source: Source root. A source that is not a directory yields an
            empty plan.
        target: Target root.
        excluded: Source-side directories that are skipped together with
            everything below them. Compared by normalized absolute path.
        exclude: Optional pattern filter, checked against source-relative
            paths.

    Raises:
        DiffError: A directory listing or an entry's metadata could not be
            read. No partial plan is returned.
        SymlinkLoopError: A symlinked directory leads back to one of its
            ancestors.
    """
    source_root = normalize_path(source)
    target_root = normalize_path(target)
    if not source_root.is_dir():
        return SyncPlan()

    if exclude is not None:
        if exclude.active:
            exclude.reset()
        else:
            exclude = None
    try:
        root_stat = os.stat(source_root)
    except OSError as exc:
        raise DiffError(source_root, exc.strerror or str(exc)) from exc

    return _diff_dir(
        source_root, target_root, "",
        skip_keys(excluded), exclude,
        frozenset({(root_stat.st_dev, root_stat.st_ino)}),
    )


def _list_dir(path: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as exc:
        raise DiffError(path, exc.strerror or str(exc)) from exc


def _diff_dir(
    source_dir: Path,
    target_dir: Path,
    rel_dir: str,
    keys: frozenset[str],
    exclude: ExcludeFilter | None,
    ancestors: frozenset[tuple[int, int]],
) -> SyncPlan:
    """Build the plan for one directory, merging each subdirectory's plan.

    *ancestors* holds the ``(st_dev, st_ino)`` of every directory on the
    current path from the root.
    """
    plan = SyncPlan()
    if exclude is not None:
        try:
            exclude.enter_directory(source_dir, rel_dir)
        except OSError as exc:
            raise DiffError(source_dir / ".gitignore", str(exc)) from exc

    for entry in _list_dir(source_dir):
        source_path = Path(entry.path)
        if path_key(source_path) in keys:
            continue

        target_path = target_dir / entry.name
        rel = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
        kind, st, reason = classify(entry)

        if kind is EntryKind.DIRECTORY:
            if exclude is not None and exclude.is_excluded(rel, is_dir=True):
                continue
            identity = (st.st_dev, st.st_ino)
            if identity in ancestors:
                raise SymlinkLoopError(
                    source_path, "directory re-enters one of its ancestors"
                )
            missing = compare_directory(target_path)
            if missing is not None:
                plan.directories.append(missing)
            plan.merge(_diff_dir(
                source_path, target_path, rel, keys, exclude,
                ancestors | {identity},
            ))
            continue

        if exclude is not None and exclude.is_excluded(rel):
            continue

        if kind is EntryKind.FILE:
            pending = compare_file(source_path, target_path, st)
            if pending is not None:
                plan.files.append(pending)
        else:
            plan.unsupported.append(UnsupportedEntry(source_path, reason))

    return plan
