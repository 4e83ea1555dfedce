"""Apply phases: create planned directories, copy planned files.

Each phase processes its whole list one item at a time. A failing item is
recorded and skipped; it never stops the rest of the batch.
"""

from __future__ import annotations

import os
import shutil
from typing import Sequence

from ._types import (
    DirectoryToCreate,
    FileToCopy,
    Outcome,
    Phase,
    ProgressCallback,
    ProgressEvent,
)


def create_directories(
    directories: Sequence[DirectoryToCreate],
    *,
    progress: ProgressCallback | None = None,
) -> list[DirectoryToCreate]:
    """Create each directory in order. Returns the items that failed.

    Creation is not recursive: a directory whose parent is missing fails.
    Plans list parents before children, so this only happens when the
    parent itself failed or was removed after the diff.
    """
    failed: list[DirectoryToCreate] = []
    total = len(directories)
    for index, directory in enumerate(directories, start=1):
        error = None
        try:
            os.mkdir(directory.path)
        except OSError as exc:
            failed.append(directory)
            error = str(exc)
        if progress is not None:
            progress(ProgressEvent(
                phase=Phase.DIRECTORIES, index=index, total=total,
                path=directory.path,
                outcome=Outcome.OK if error is None else Outcome.FAILED,
                error=error,
            ))
    return failed


def copy_files(
    files: Sequence[FileToCopy],
    *,
    progress: ProgressCallback | None = None,
    preserve_times: bool = False,
) -> list[FileToCopy]:
    """Copy each file's content over its target. Returns the items that failed.

    Permission bits are copied along with the content. With
    *preserve_times* the source's access and modification times are copied
    too; otherwise the target gets the time of the copy. A target that is
    a directory fails instead of receiving the file. Modification times
    are not re-checked here.
    """
    copy_meta = shutil.copystat if preserve_times else shutil.copymode
    failed: list[FileToCopy] = []
    total = len(files)
    for index, item in enumerate(files, start=1):
        error = None
        try:
            shutil.copyfile(item.source, item.target)
            copy_meta(item.source, item.target)
        except OSError as exc:
            failed.append(item)
            error = str(exc)
        if progress is not None:
            progress(ProgressEvent(
                phase=Phase.FILES, index=index, total=total,
                path=item.source,
                outcome=Outcome.OK if error is None else Outcome.FAILED,
                error=error,
            ))
    return failed
