"""Tests for the apply phases (create_directories / copy_files)."""

import os
import stat

import pytest

from treesync import (
    DirectoryToCreate,
    FileToCopy,
    Outcome,
    Phase,
    copy_files,
    create_directories,
)


@pytest.fixture
def events():
    """A list plus a progress callback appending to it."""
    collected = []
    return collected, collected.append


# ---------------------------------------------------------------------------
# create_directories
# ---------------------------------------------------------------------------

class TestCreateDirectories:
    def test_creates_in_order(self, dst):
        dirs = [
            DirectoryToCreate(dst / "a"),
            DirectoryToCreate(dst / "a" / "b"),
            DirectoryToCreate(dst / "c"),
        ]
        assert create_directories(dirs) == []
        assert (dst / "a" / "b").is_dir()
        assert (dst / "c").is_dir()

    def test_empty_list(self, events):
        collected, callback = events
        assert create_directories([], progress=callback) == []
        assert collected == []

    def test_missing_parent_fails_without_stopping_batch(self, dst):
        bad = DirectoryToCreate(dst / "missing" / "child")
        good = DirectoryToCreate(dst / "fine")
        assert create_directories([bad, good]) == [bad]
        assert (dst / "fine").is_dir()
        assert not (dst / "missing").exists()

    def test_already_existing_directory_fails(self, dst):
        (dst / "there").mkdir()
        item = DirectoryToCreate(dst / "there")
        assert create_directories([item]) == [item]

    def test_child_of_failed_parent_fails(self, dst, write_file):
        write_file(dst / "blocker", "a file")
        parent = DirectoryToCreate(dst / "blocker")
        child = DirectoryToCreate(dst / "blocker" / "child")
        assert create_directories([parent, child]) == [parent, child]

    def test_progress_events(self, dst, events):
        collected, callback = events
        (dst / "there").mkdir()
        dirs = [DirectoryToCreate(dst / "new"), DirectoryToCreate(dst / "there")]
        create_directories(dirs, progress=callback)

        assert [e.index for e in collected] == [1, 2]
        assert all(e.total == 2 for e in collected)
        assert all(e.phase is Phase.DIRECTORIES for e in collected)
        assert collected[0].outcome is Outcome.OK
        assert collected[0].error is None
        assert collected[0].percent == 50.0
        assert collected[1].outcome is Outcome.FAILED
        assert collected[1].path == dst / "there"
        assert collected[1].error
        assert collected[1].percent == 100.0


# ---------------------------------------------------------------------------
# copy_files
# ---------------------------------------------------------------------------

class TestCopyFiles:
    def test_copies_content(self, src, dst, write_file):
        s = write_file(src / "a.txt", "alpha")
        assert copy_files([FileToCopy(s, dst / "a.txt")]) == []
        assert (dst / "a.txt").read_text() == "alpha"
        assert s.read_text() == "alpha"

    def test_overwrites_existing_target(self, src, dst, write_file):
        s = write_file(src / "a.txt", "new")
        t = write_file(dst / "a.txt", "old and longer")
        assert copy_files([FileToCopy(s, t)]) == []
        assert t.read_text() == "new"

    def test_empty_list(self, events):
        collected, callback = events
        assert copy_files([], progress=callback) == []
        assert collected == []

    def test_missing_parent_fails_others_succeed(self, src, dst, write_file):
        a = write_file(src / "a.txt", "a")
        b = write_file(src / "sub" / "b.txt", "b")
        c = write_file(src / "c.txt", "c")
        orphan = FileToCopy(b, dst / "sub" / "b.txt")
        items = [FileToCopy(a, dst / "a.txt"), orphan, FileToCopy(c, dst / "c.txt")]

        assert copy_files(items) == [orphan]
        assert (dst / "a.txt").read_text() == "a"
        assert (dst / "c.txt").read_text() == "c"
        assert not (dst / "sub").exists()

    def test_missing_source_fails(self, src, dst):
        item = FileToCopy(src / "gone.txt", dst / "gone.txt")
        assert copy_files([item]) == [item]

    def test_directory_target_fails(self, src, dst, write_file):
        s = write_file(src / "a.txt", "a")
        (dst / "a.txt").mkdir()
        item = FileToCopy(s, dst / "a.txt")
        assert copy_files([item]) == [item]
        assert list((dst / "a.txt").iterdir()) == []

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_copies_permission_bits(self, src, dst, write_file):
        s = write_file(src / "run.sh", "#!/bin/sh\n")
        s.chmod(0o755)
        copy_files([FileToCopy(s, dst / "run.sh")])
        assert stat.S_IMODE((dst / "run.sh").stat().st_mode) == 0o755

    def test_target_gets_copy_time_by_default(self, src, dst, write_file):
        s = write_file(src / "a.txt", "a", age=0)
        copy_files([FileToCopy(s, dst / "a.txt")])
        assert (dst / "a.txt").stat().st_mtime_ns > s.stat().st_mtime_ns

    def test_preserve_times(self, src, dst, write_file):
        s = write_file(src / "a.txt", "a", age=0)
        copy_files([FileToCopy(s, dst / "a.txt")], preserve_times=True)
        assert (dst / "a.txt").stat().st_mtime_ns == s.stat().st_mtime_ns

    def test_progress_reports_source_path(self, src, dst, write_file, events):
        collected, callback = events
        s = write_file(src / "a.txt", "a")
        missing = FileToCopy(src / "gone.txt", dst / "gone.txt")
        copy_files([FileToCopy(s, dst / "a.txt"), missing], progress=callback)

        assert [e.path for e in collected] == [s, src / "gone.txt"]
        assert [e.outcome for e in collected] == [Outcome.OK, Outcome.FAILED]
        assert all(e.phase is Phase.FILES for e in collected)
