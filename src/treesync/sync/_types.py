"""Data structures for diff/apply operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable


class CopyKind(str, Enum):
    """Why a file is planned for copy: ``ADD`` (target absent) or ``UPDATE``."""
    ADD = "add"
    UPDATE = "update"

    def __str__(self) -> str:          # noqa: D105
        return self.value


class Phase(str, Enum):
    """Apply phase a :class:`ProgressEvent` belongs to."""
    DIRECTORIES = "directories"
    FILES = "files"

    def __str__(self) -> str:          # noqa: D105
        return self.value


class Outcome(str, Enum):
    """Result of applying a single plan item."""
    OK = "ok"
    FAILED = "failed"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass(frozen=True)
class FileToCopy:
    """A pending file copy.

    Attributes:
        source: Absolute path of the source file.
        target: Absolute path the file is copied to.
        kind: :class:`CopyKind`; informational only, ignored by equality.
    """
    source: Path
    target: Path
    kind: CopyKind = field(default=CopyKind.ADD, compare=False)


@dataclass(frozen=True)
class DirectoryToCreate:
    """A target-side directory that does not exist yet."""
    path: Path


@dataclass(frozen=True)
class UnsupportedEntry:
    """A source entry that is neither a regular file nor a directory.

    Attributes:
        path: Absolute source path.
        reason: Human-readable description (``"socket"``, ``"dangling symlink"``...).
    """
    path: Path
    reason: str


@dataclass
class SyncPlan:
    """Everything a diff decided to do, in traversal order.

    Attributes:
        files: Files to copy.
        directories: Directories to create, parents before children.
        unsupported: Source entries that were skipped.
    """
    files: list[FileToCopy] = field(default_factory=list)
    directories: list[DirectoryToCreate] = field(default_factory=list)
    unsupported: list[UnsupportedEntry] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """``True`` if there is nothing to create or copy."""
        return not self.files and not self.directories

    @property
    def total(self) -> int:
        """Number of directory and file items."""
        return len(self.files) + len(self.directories)

    def merge(self, other: SyncPlan) -> None:
        """Append the items of a child subtree's plan to this one."""
        self.files.extend(other.files)
        self.directories.extend(other.directories)
        self.unsupported.extend(other.unsupported)


@dataclass(frozen=True)
class ProgressEvent:
    """Emitted once per processed item during an apply phase.

    Attributes:
        phase: :class:`Phase` being applied.
        index: 1-based position of the item just processed.
        total: Number of items in the phase.
        path: Directory path, or the source path of a file copy.
        outcome: :class:`Outcome` of the item.
        error: Error message when *outcome* is ``FAILED``.
    """
    phase: Phase
    index: int
    total: int
    path: Path
    outcome: Outcome
    error: str | None = None

    @property
    def percent(self) -> float:
        """Percentage of the phase completed, 0.0 to 100.0."""
        if not self.total:
            return 100.0
        return self.index / self.total * 100.0


ProgressCallback = Callable[[ProgressEvent], None]


class ActionKind(str, Enum):
    """Kind of action in a :class:`SyncReport`: ``MKDIR``, ``ADD``, or ``UPDATE``."""
    MKDIR = "mkdir"
    ADD = "add"
    UPDATE = "update"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass
class SyncAction:
    """A single target-side action in a :class:`SyncReport`.

    Attributes:
        path: Target path.
        action: :class:`ActionKind` value.
    """
    path: Path
    action: ActionKind


@dataclass
class ApplyError:
    """A path that failed (or was skipped) during an operation.

    Attributes:
        path: The path that caused the error.
        error: Human-readable error message.
    """
    path: str
    error: str


@dataclass
class SyncReport:
    """Result of :func:`~treesync.sync_tree` or its dry run.

    Attributes:
        created: Directories created (or that would be created).
        copied: Files copied (or that would be copied).
        errors: Per-item apply failures.
        warnings: Unsupported source entries that were skipped.
        failed_directories: Directory items that could not be created.
        failed_files: File items that could not be copied.
    """
    created: list[DirectoryToCreate] = field(default_factory=list)
    copied: list[FileToCopy] = field(default_factory=list)
    errors: list[ApplyError] = field(default_factory=list)
    warnings: list[ApplyError] = field(default_factory=list)
    failed_directories: list[DirectoryToCreate] = field(default_factory=list)
    failed_files: list[FileToCopy] = field(default_factory=list)

    @property
    def in_sync(self) -> bool:
        """``True`` if nothing was (or would be) created or copied."""
        return (not self.created and not self.copied
                and not self.failed_directories and not self.failed_files)

    @property
    def ok(self) -> bool:
        """``True`` if no item failed."""
        return not self.failed_directories and not self.failed_files

    @property
    def total(self) -> int:
        """Number of successful directory and file actions."""
        return len(self.created) + len(self.copied)

    def actions(self) -> list[SyncAction]:
        """Return all successful actions as a flat list sorted by path."""
        result: list[SyncAction] = []
        for d in self.created:
            result.append(SyncAction(path=d.path, action=ActionKind.MKDIR))
        for f in self.copied:
            kind = ActionKind.UPDATE if f.kind is CopyKind.UPDATE else ActionKind.ADD
            result.append(SyncAction(path=f.target, action=kind))
        result.sort(key=lambda a: a.path)
        return result
