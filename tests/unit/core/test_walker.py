from __future__ import annotations

"""
Unit tests for the Concurrent Directory Walker.

Verifies:
1. The walk returns exactly the reachable leaf files (no directories).
2. Empty directories complete with an empty result.
3. Listing failures propagate as ListingError.
4. Stat failures follow the configured policy (skip, retry, assume file).
"""

import asyncio
import os
from pathlib import Path
from typing import Set

import pytest

from icedtea.core.walker import StatFailurePolicy, walk, walk_tree
from icedtea.domain.errors import ListingError


def _expected_files(root: Path) -> Set[str]:
    found = set()
    for dirpath, _, filenames in os.walk(str(root)):
        for name in filenames:
            found.add(os.path.join(dirpath, name))
    return found


# -----------------------------------------------------------------------------
# TRAVERSAL
# -----------------------------------------------------------------------------

def test_walk_returns_every_leaf_file(sample_project: Path) -> None:
    """TC-01: All files at every depth are found, directories are excluded."""
    result = walk_tree(str(sample_project))

    assert set(result) == _expected_files(sample_project)
    assert len(result) == 4
    assert not any(os.path.isdir(p) for p in result)


def test_walk_empty_directory(tmp_path: Path) -> None:
    """TC-02: An empty root completes immediately with no result."""
    assert walk_tree(str(tmp_path)) == []


def test_walk_tree_with_only_empty_subdirectories(tmp_path: Path) -> None:
    (tmp_path / "a" / "b").mkdir(parents=True)
    (tmp_path / "c").mkdir()

    assert walk_tree(str(tmp_path)) == []


def test_walk_deep_and_wide_tree(tmp_path: Path) -> None:
    """TC-03: Fan-out/fan-in joins correctly across many levels and siblings."""
    current = tmp_path
    for depth in range(15):
        current = current / f"level{depth}"
        current.mkdir()
        for i in range(5):
            (current / f"f{i}.tea").write_text(str(i), encoding="utf-8")

    result = walk_tree(str(tmp_path))

    assert len(result) == 75
    assert set(result) == _expected_files(tmp_path)


def test_walk_paths_keep_root_prefix(sample_project: Path) -> None:
    root = str(sample_project)
    assert all(p.startswith(root + os.sep) for p in walk_tree(root))


def test_async_walk_runs_in_existing_loop(sample_project: Path) -> None:
    async def runner():
        return await walk(str(sample_project))

    assert set(asyncio.run(runner())) == _expected_files(sample_project)


# -----------------------------------------------------------------------------
# FAILURE POLICIES
# -----------------------------------------------------------------------------

def test_listing_error_propagates(sample_project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """TC-04: A directory that cannot be listed aborts the walk."""
    real_listdir = os.listdir
    broken = str(sample_project / "sub")

    def fake_listdir(path):
        if path == broken:
            raise PermissionError(13, "Permission denied", path)
        return real_listdir(path)

    monkeypatch.setattr(os, "listdir", fake_listdir)

    with pytest.raises(ListingError) as exc_info:
        walk_tree(str(sample_project))

    assert exc_info.value.path == broken
    assert isinstance(exc_info.value.__cause__, PermissionError)


def test_listing_error_on_root(tmp_path: Path) -> None:
    with pytest.raises(ListingError, match="Cannot list directory"):
        walk_tree(str(tmp_path / "missing"))


def _failing_stat(monkeypatch: pytest.MonkeyPatch, target: str, failures: int) -> list:
    """Make os.stat fail *failures* times for *target*; return the call log."""
    real_stat = os.stat
    calls = []

    def fake_stat(path, *args, **kwargs):
        if path == target:
            calls.append(path)
            if len(calls) <= failures:
                raise FileNotFoundError(2, "No such file or directory", path)
        return real_stat(path, *args, **kwargs)

    monkeypatch.setattr(os, "stat", fake_stat)
    return calls


def test_stat_failure_skip_policy(sample_project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """TC-05: SKIP drops the entry that could not be classified."""
    target = str(sample_project / "a.tea")
    _failing_stat(monkeypatch, target, failures=10)

    result = walk_tree(str(sample_project), stat_policy=StatFailurePolicy.SKIP)

    assert target not in result
    assert len(result) == 3


def test_stat_failure_assume_file_policy(sample_project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """TC-06: ASSUME_FILE keeps the entry as a file."""
    target = str(sample_project / "a.tea")
    _failing_stat(monkeypatch, target, failures=10)

    result = walk_tree(str(sample_project), stat_policy=StatFailurePolicy.ASSUME_FILE)

    assert target in result
    assert len(result) == 4


def test_stat_failure_retry_policy_recovers(sample_project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """TC-07: RETRY re-stats the entry and keeps it once the stat succeeds."""
    target = str(sample_project / "a.tea")
    calls = _failing_stat(monkeypatch, target, failures=1)

    result = walk_tree(str(sample_project), stat_policy=StatFailurePolicy.RETRY, stat_retries=2)

    assert target in result
    assert len(calls) == 2


def test_stat_failure_retry_policy_gives_up(sample_project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = str(sample_project / "a.tea")
    calls = _failing_stat(monkeypatch, target, failures=10)

    result = walk_tree(str(sample_project), stat_policy=StatFailurePolicy.RETRY, stat_retries=2)

    assert target not in result
    assert len(calls) == 3


def test_stat_policy_accepts_config_strings() -> None:
    assert StatFailurePolicy("assume_file") is StatFailurePolicy.ASSUME_FILE
