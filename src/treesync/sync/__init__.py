"""Diff a source tree against a target tree and apply the result.

The diff (:func:`diff_trees`) walks the source and builds a
:class:`SyncPlan` without modifying anything. The apply phases
(:func:`create_directories`, :func:`copy_files`) execute the plan item by
item and return the items that failed. :func:`sync_tree` runs all three.
"""

from ._types import (
    ActionKind,
    ApplyError,
    CopyKind,
    DirectoryToCreate,
    FileToCopy,
    Outcome,
    Phase,
    ProgressCallback,
    ProgressEvent,
    SyncAction,
    SyncPlan,
    SyncReport,
    UnsupportedEntry,
)
from ._compare import EntryKind, classify, compare_directory, compare_file
from ._walk import diff_trees
from ._apply import copy_files, create_directories
from ._ops import sync_tree, sync_tree_dry_run

__all__ = [
    # Types
    "ActionKind", "ApplyError", "CopyKind", "DirectoryToCreate", "EntryKind", "FileToCopy",
    "Outcome", "Phase", "ProgressCallback", "ProgressEvent", "SyncAction",
    "SyncPlan", "SyncReport", "UnsupportedEntry",
    # Functions
    "classify", "compare_directory", "compare_file",
    "diff_trees", "create_directories", "copy_files",
    "sync_tree", "sync_tree_dry_run",
]
