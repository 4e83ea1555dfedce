"""Per-entry comparison: decide what a single source entry needs."""

from __future__ import annotations

import errno
import os
import stat
from enum import Enum
from pathlib import Path

from ..exceptions import DiffError
from ._types import CopyKind, DirectoryToCreate, FileToCopy


class EntryKind(str, Enum):
    """Classification of a source entry, symlinks followed."""
    FILE = "file"
    DIRECTORY = "directory"
    UNSUPPORTED = "unsupported"

    def __str__(self) -> str:          # noqa: D105
        return self.value


_SPECIAL_NAMES = (
    (stat.S_ISSOCK, "socket"),
    (stat.S_ISFIFO, "fifo"),
    (stat.S_ISBLK, "block device"),
    (stat.S_ISCHR, "character device"),
)


def _stat(path: Path) -> os.stat_result | None:
    """``os.stat`` following symlinks; ``None`` if nothing is there.

    Any other failure aborts the diff.
    """
    try:
        return os.stat(path)
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise DiffError(path, exc.strerror or str(exc)) from exc


def classify(entry: os.DirEntry) -> tuple[EntryKind, os.stat_result | None, str]:
    """Classify a directory entry.

    Returns ``(kind, stat_result, reason)``. *stat_result* is ``None`` for
    dangling or looping symlinks; *reason* is only meaningful for
    ``UNSUPPORTED``.
    """
    path = Path(entry.path)
    try:
        st = os.stat(path)
    except FileNotFoundError:
        if entry.is_symlink():
            return EntryKind.UNSUPPORTED, None, "dangling symlink"
        # Vanished between listing and stat.
        raise DiffError(path, "entry disappeared during scan")
    except OSError as exc:
        if exc.errno == errno.ELOOP and entry.is_symlink():
            return EntryKind.UNSUPPORTED, None, "symlink loop"
        raise DiffError(path, exc.strerror or str(exc)) from exc
    if stat.S_ISDIR(st.st_mode):
        return EntryKind.DIRECTORY, st, ""
    if stat.S_ISREG(st.st_mode):
        return EntryKind.FILE, st, ""
    for test, name in _SPECIAL_NAMES:
        if test(st.st_mode):
            return EntryKind.UNSUPPORTED, st, name
    return EntryKind.UNSUPPORTED, st, "unknown file type"


def compare_directory(target_path: Path) -> DirectoryToCreate | None:
    """Return a :class:`DirectoryToCreate` if nothing exists at *target_path*.

    Whatever is at *target_path* counts as existing, directory or not.
    """
    if _stat(target_path) is None:
        return DirectoryToCreate(target_path)
    return None


def compare_file(
    source_path: Path,
    target_path: Path,
    source_stat: os.stat_result | None = None,
) -> FileToCopy | None:
    """Decide whether *source_path* must be copied to *target_path*.

    Copies when the target is absent, or when its modification time is
    strictly earlier than the source's. Equal or newer targets are left
    alone. Times are compared in nanoseconds.
    """
    target_stat = _stat(target_path)
    if target_stat is None:
        return FileToCopy(source_path, target_path, CopyKind.ADD)
    if source_stat is None:
        source_stat = _stat(source_path)
        if source_stat is None:
            raise DiffError(source_path, "entry disappeared during scan")
    if target_stat.st_mtime_ns < source_stat.st_mtime_ns:
        return FileToCopy(source_path, target_path, CopyKind.UPDATE)
    return None
