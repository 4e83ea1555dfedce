"""Shared fixtures for treesync tests."""

import os

import pytest
from click.testing import CliRunner


# A fixed point in the past, in nanoseconds, for explicit mtimes.
BASE_NS = 1_600_000_000 * 10**9
SECOND_NS = 10**9


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def write_file():
    """Return ``write(path, text, age=None)``.

    Parent directories are created. When *age* is given, the file's mtime
    is set to ``BASE_NS + age`` seconds so tests control ordering exactly.
    """
    def write(path, text="", age=None):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        if age is not None:
            ns = BASE_NS + age * SECOND_NS
            os.utime(path, ns=(ns, ns))
        return path
    return write


@pytest.fixture
def src(tmp_path):
    d = tmp_path / "source"
    d.mkdir()
    return d


@pytest.fixture
def dst(tmp_path):
    d = tmp_path / "target"
    d.mkdir()
    return d


@pytest.fixture
def scenario(src, dst, write_file):
    """The reference layout.

    Source: a.txt (new), sub/b.txt (newer than target's), sub2/c.txt.
    Target: sub/b.txt (stale), sub3/relic.txt (target-only).
    """
    write_file(src / "a.txt", "alpha")
    write_file(dst / "sub" / "b.txt", "old beta", age=0)
    write_file(src / "sub" / "b.txt", "new beta", age=10)
    write_file(src / "sub2" / "c.txt", "gamma")
    write_file(dst / "sub3" / "relic.txt", "relic")
    return src, dst
