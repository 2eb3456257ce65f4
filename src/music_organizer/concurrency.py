"""File locking, disk space checks, and the parallel task group."""

import os
import shutil
import sys
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TypeVar

from loguru import logger

log = logger.bind(stage="concurrency")

T = TypeVar("T")
R = TypeVar("R")


class LockError(Exception):
    """Raised when lock cannot be acquired."""


def acquire_global_lock(lock_dir: Path, skip: bool = False) -> object | None:
    """Acquire a global file lock for singleton organizer execution.

    Returns the lock file handle (keep reference to maintain lock),
    or None if locking was skipped.
    Raises LockError if another instance holds the lock.
    """
    log.debug(f"acquire_global_lock(lock_dir={lock_dir}, skip={skip})")

    if skip:
        log.debug("Skipping lock acquisition")
        return None

    lock_dir.mkdir(parents=True, exist_ok=True)
    lock_file = lock_dir / "music-organizer.lock"

    if sys.platform == "win32":
        import msvcrt
        fh = open(lock_file, "w")
        try:
            msvcrt.locking(fh.fileno(), msvcrt.LK_NBLCK, 1)
        except OSError:
            fh.close()
            log.warning(f"Failed to acquire lock at {lock_file}")
            raise LockError("Another organizer instance is running")
        log.info(f"Lock acquired at {lock_file}")
        return fh
    else:
        import fcntl
        fh = open(lock_file, "w")
        try:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError:
            fh.close()
            log.warning(f"Failed to acquire lock at {lock_file}")
            raise LockError("Another organizer instance is running")
        log.info(f"Lock acquired at {lock_file}")
        return fh


def check_disk_space(source_path: Path, work_dir: Path, multiplier: int = 1) -> bool:
    """Check that work_dir has enough free space.

    Requires at least multiplier * source_size available.
    Returns True if sufficient, False otherwise.
    """
    log.debug(f"check_disk_space(source_path={source_path}, work_dir={work_dir}, multiplier={multiplier})")

    source_size = source_path.stat().st_size
    required = source_size * multiplier
    usage = shutil.disk_usage(work_dir)
    result = usage.free >= required

    log.debug(f"Disk space check: required={required:,} bytes, free={usage.free:,} bytes, sufficient={result}")

    return result


def calculate_max_workers(configured: int, reserve: int = 0) -> int:
    """Worker count for a task group.

    A positive configured value wins. Otherwise uses the CPU count minus
    reserve, never less than one.
    """
    if configured > 0:
        return configured
    cpu_count = os.cpu_count() or 1
    return max(1, cpu_count - reserve)


def run_parallel(
    func: Callable[[T], R],
    items: Iterable[T],
    max_workers: int,
    label: str = "task",
) -> list[R]:
    """Run func over items on a thread pool and wait for every task.

    Returns the results of the tasks that succeeded, in completion order.
    A task that raises is logged and contributes no result; it never
    cancels its siblings.
    """
    items = list(items)
    if not items:
        return []

    log.debug(f"run_parallel: {len(items)} {label} item(s), max_workers={max_workers}")

    results: list[R] = []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(func, item): item for item in items}
        for future in as_completed(futures):
            try:
                results.append(future.result())
            except Exception as e:
                log.error(f"{label} failed for {futures[future]}: {e}")
    return results
