"""Exceptions for treesync."""

from __future__ import annotations

import os


class DiffError(Exception):
    """Raised when the source tree cannot be compared against the target.

    Any failure to list a directory or read an entry's metadata aborts the
    whole diff; no partial plan is returned and nothing is applied.

    Attributes:
        path: The path whose listing or metadata could not be read.
    """

    def __init__(self, path: str | os.PathLike[str], message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = os.fspath(path)


class SymlinkLoopError(DiffError):
    """Raised when a symlinked directory would re-enter one of its ancestors."""
