"""Exclusion support for the source-tree walk.

Two mechanisms decide which source paths a diff never visits:

* skip directories: absolute source-side directory paths compared by exact
  (normalized) path, built by :func:`resolve_skip_dirs`;
* exclude patterns: ``--exclude`` patterns, ``--exclude-from`` files and
  optional per-directory ``.gitignore`` loading, combined by
  :class:`ExcludeFilter`.

Pattern syntax follows gitignore rules (implemented by
``dulwich.ignore.IgnoreFilter``).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Sequence

from dulwich.ignore import IgnoreFilter


# ---------------------------------------------------------------------------
# Path normalization
# ---------------------------------------------------------------------------

def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Return *path* made absolute with ``.``/``..`` and trailing separators removed.

    Symlinks are not resolved: the walk builds child paths by joining names
    onto the normalized root, so both sides stay in the same form.
    """
    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))


def path_key(path: str | os.PathLike[str]) -> str:
    """Comparison key for exact-path exclusion (case-folded where the OS is)."""
    return os.path.normcase(str(normalize_path(path)))


def skip_keys(paths: Iterable[str | os.PathLike[str]]) -> frozenset[str]:
    """Build the membership set used by the walk from skip directory paths."""
    return frozenset(path_key(p) for p in paths)


def resolve_skip_dirs(
    source: str | os.PathLike[str],
    skip_dirs: Iterable[str | os.PathLike[str]] | None,
) -> frozenset[Path]:
    """Resolve user-supplied skip directories against *source*.

    Relative values are taken relative to *source*; absolute values are
    kept as given. Only values naming an existing directory are returned,
    everything else is silently dropped.
    """
    base = normalize_path(source)
    result: set[Path] = set()
    for raw in skip_dirs or ():
        candidate = normalize_path(base / Path(raw))
        if candidate.is_dir():
            result.add(candidate)
    return frozenset(result)


# ---------------------------------------------------------------------------
# Pattern filter
# ---------------------------------------------------------------------------

def _read_patterns(path: str | os.PathLike[str]) -> list[bytes]:
    """Pattern lines of an exclude file, without blanks and ``#`` comments."""
    lines = []
    for raw in Path(path).read_bytes().splitlines():
        line = raw.strip()
        if line and not line.startswith(b"#"):
            lines.append(line)
    return lines


class ExcludeFilter:
    """Source-path filter built from patterns and ``.gitignore`` files.

    Patterns given directly or through *exclude_from* apply to the whole
    tree. With *gitignore* set, each ``.gitignore`` found during a walk
    applies to the directory holding it and everything below; the
    ``.gitignore`` files themselves are never synced.

    One filter may serve several walks. :meth:`reset` forgets the
    ``.gitignore`` rules of the previous tree; :func:`~treesync.diff_trees`
    calls it before each walk.
    """

    def __init__(
        self,
        *,
        patterns: Sequence[str] | None = None,
        exclude_from: str | os.PathLike[str] | None = None,
        gitignore: bool = False,
    ) -> None:
        lines = [p.encode("utf-8") for p in patterns or ()]
        if exclude_from is not None:
            lines.extend(_read_patterns(exclude_from))
        self._global: IgnoreFilter | None = IgnoreFilter(lines) if lines else None
        self._gitignore = gitignore
        # source-relative directory -> its .gitignore rules (None if absent)
        self._local: dict[str, IgnoreFilter | None] = {}

    @property
    def active(self) -> bool:
        """True if any filtering is configured."""
        return self._global is not None or self._gitignore

    def reset(self) -> None:
        """Drop the ``.gitignore`` rules collected by a previous walk."""
        self._local.clear()

    def enter_directory(self, abs_dir: Path, rel_dir: str) -> None:
        """Record the ``.gitignore`` of *abs_dir* (gitignore mode only).

        An unreadable ``.gitignore`` raises ``OSError``.
        """
        if not self._gitignore or rel_dir in self._local:
            return
        candidate = abs_dir / ".gitignore"
        self._local[rel_dir] = (
            IgnoreFilter.from_path(str(candidate)) if candidate.is_file() else None
        )

    def _local_verdicts(self, rel_path: str, is_dir: bool):
        """Yield each ancestor ``.gitignore`` verdict on *rel_path*, root first."""
        parts = rel_path.split("/")
        for depth in range(len(parts)):
            rules = self._local.get("/".join(parts[:depth]))
            if rules is None:
                continue
            tail = "/".join(parts[depth:])
            yield rules.is_ignored(tail + "/" if is_dir else tail)

    def is_excluded(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Return True if *rel_path* (``/``-separated, source-relative) is filtered out.

        Global patterns win outright. Otherwise the first ``.gitignore``
        that matches the path, positively or by negation, decides.
        """
        if self._global is not None:
            if self._global.is_ignored(rel_path + "/" if is_dir else rel_path):
                return True
        if not self._gitignore:
            return False
        if not is_dir and rel_path.rpartition("/")[2] == ".gitignore":
            return True
        for verdict in self._local_verdicts(rel_path, is_dir):
            if verdict is not None:
                return verdict
        return False
