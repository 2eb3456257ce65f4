"""Low-level file primitives shared by the organizing passes."""

from __future__ import annotations

import errno
import os
import shutil
import stat
import threading
from pathlib import Path

from loguru import logger

log = logger.bind(stage="files")

# Serializes the exists-check + rename of non-overwriting moves across workers
_claim_lock = threading.Lock()


def paths_equal(a: Path, b: Path) -> bool:
    """Compare two paths with the platform's case rules."""
    return os.path.normcase(str(a)) == os.path.normcase(str(b))


def _rename(source: Path, dest: Path) -> None:
    """Atomic rename with a copy fallback for cross-device moves."""
    try:
        os.replace(source, dest)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        log.debug(f"Cross-device move, falling back to shutil.move: {source}")
        shutil.move(str(source), str(dest))


def move_file(source: Path, dest: Path, overwrite: bool = False) -> None:
    """Move source to dest.

    Without overwrite, raises FileExistsError when dest is already taken.
    Other OSErrors propagate to the caller.
    """
    if overwrite:
        _rename(source, dest)
    else:
        with _claim_lock:
            if dest.exists():
                raise FileExistsError(errno.EEXIST, "Destination exists", str(dest))
            _rename(source, dest)
    log.info(f'Moved "{source}" -> "{dest}"')


def delete_file(path: Path) -> None:
    """Delete a file, clearing a read-only attribute first."""
    mode = path.stat().st_mode
    if not mode & stat.S_IWRITE:
        path.chmod(mode | stat.S_IWRITE)
    path.unlink()
    log.debug(f"Deleted {path}")
