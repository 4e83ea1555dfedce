from .exceptions import DiffError, SymlinkLoopError
from ._exclude import ExcludeFilter, resolve_skip_dirs
from .sync import diff_trees, create_directories, copy_files
from .sync import sync_tree, sync_tree_dry_run
from .sync import (
    ActionKind, ApplyError, CopyKind, DirectoryToCreate, FileToCopy, Outcome, Phase,
    ProgressEvent, SyncAction, SyncPlan, SyncReport, UnsupportedEntry,
)

__all__ = [
    "DiffError", "SymlinkLoopError",
    "ExcludeFilter", "resolve_skip_dirs",
    "diff_trees", "create_directories", "copy_files",
    "sync_tree", "sync_tree_dry_run",
    "ActionKind", "ApplyError", "CopyKind", "DirectoryToCreate", "FileToCopy", "Outcome",
    "Phase", "ProgressEvent", "SyncAction", "SyncPlan", "SyncReport", "UnsupportedEntry",
]
