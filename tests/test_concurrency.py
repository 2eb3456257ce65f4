"""Tests for file locking, disk space checks, and the parallel task group."""

import os
import threading
from unittest.mock import patch

import pytest

from music_organizer.concurrency import (
    LockError,
    acquire_global_lock,
    calculate_max_workers,
    check_disk_space,
    run_parallel,
)


class TestAcquireGlobalLock:
    def test_skip_returns_none(self, tmp_path):
        assert acquire_global_lock(tmp_path, skip=True) is None

    def test_creates_lock_file(self, tmp_path):
        lock_dir = tmp_path / "locks"
        fh = acquire_global_lock(lock_dir)
        assert fh is not None
        assert (lock_dir / "music-organizer.lock").exists()
        fh.close()

    def test_second_lock_raises(self, tmp_path):
        lock_dir = tmp_path / "locks"
        fh1 = acquire_global_lock(lock_dir)
        with pytest.raises(LockError, match="Another organizer instance"):
            acquire_global_lock(lock_dir)
        fh1.close()

    def test_lock_released_after_close(self, tmp_path):
        lock_dir = tmp_path / "locks"
        fh1 = acquire_global_lock(lock_dir)
        fh1.close()
        fh2 = acquire_global_lock(lock_dir)
        assert fh2 is not None
        fh2.close()


class TestCheckDiskSpace:
    def test_sufficient_space(self, tmp_path):
        source = tmp_path / "source.flac"
        source.write_bytes(b"x" * 1000)
        assert check_disk_space(source, tmp_path) is True

    def test_insufficient_space(self, tmp_path):
        source = tmp_path / "source.flac"
        source.write_bytes(b"x" * 1000)
        fake_usage = type("Usage", (), {"free": 100, "total": 1000, "used": 900})()
        with patch("music_organizer.concurrency.shutil.disk_usage", return_value=fake_usage):
            assert check_disk_space(source, tmp_path) is False


class TestCalculateMaxWorkers:
    def test_configured_value_wins(self):
        assert calculate_max_workers(3) == 3

    def test_auto_uses_cpu_count(self):
        assert calculate_max_workers(0) == max(1, os.cpu_count() or 1)

    def test_reserve_never_below_one(self):
        with patch("music_organizer.concurrency.os.cpu_count", return_value=1):
            assert calculate_max_workers(0, reserve=1) == 1

    def test_reserve_subtracted(self):
        with patch("music_organizer.concurrency.os.cpu_count", return_value=8):
            assert calculate_max_workers(0, reserve=1) == 7


class TestRunParallel:
    def test_empty_items(self):
        assert run_parallel(lambda x: x, [], max_workers=2) == []

    def test_collects_all_results(self):
        results = run_parallel(lambda x: x * 2, [1, 2, 3, 4], max_workers=3)
        assert sorted(results) == [2, 4, 6, 8]

    def test_failed_task_does_not_cancel_siblings(self):
        def work(x):
            if x == 2:
                raise RuntimeError("boom")
            return x

        results = run_parallel(work, [1, 2, 3], max_workers=2)
        assert sorted(results) == [1, 3]

    def test_waits_for_every_task(self):
        seen = []
        lock = threading.Lock()

        def work(x):
            with lock:
                seen.append(x)
            return x

        run_parallel(work, range(20), max_workers=4)
        assert sorted(seen) == list(range(20))
