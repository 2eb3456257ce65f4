"""Re-encode lossless files as maximally compressed FLAC via ffmpeg.

Runs after organizing. A file is only replaced when the re-encode succeeds
(exit code 0, non-empty output that loads with a non-zero bitrate) and the
result is not larger than the input.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from .concurrency import calculate_max_workers, check_disk_space, run_parallel
from .errors import ExternalToolError, MetadataError
from .models import TranscodeOutcome
from .ops.files import delete_file, move_file
from .tags import load_track

if TYPE_CHECKING:
    from .config import OrganizerConfig

log = logger.bind(stage="transcode")


def _run_ffmpeg(input_path: Path, output_path: Path, compression_level: int) -> None:
    """Encode input_path to FLAC at output_path. Raises ExternalToolError."""
    cmd = [
        "ffmpeg",
        "-n",
        "-i",
        str(input_path),
        "-codec:a",
        "flac",
        "-compression_level",
        str(compression_level),
        str(output_path),
    ]
    log.debug(f"Command: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise ExternalToolError("ffmpeg", -1, str(e)) from e
    if result.returncode != 0:
        raise ExternalToolError("ffmpeg", result.returncode, result.stderr[-500:])


def _discard(path: Path) -> bool:
    if not path.exists():
        return True
    try:
        delete_file(path)
        return True
    except OSError as e:
        log.error(f"Failed to delete {path}: {e}")
        return False


def _restore(current: Path, original: Path) -> None:
    """Move a temporarily renamed input back to where it started."""
    if current == original:
        return
    try:
        move_file(current, original, overwrite=True)
    except OSError as e:
        log.error(f"Failed to move {current} back to {original}: {e}")


def _output_is_valid(output_path: Path) -> bool:
    if not output_path.is_file() or output_path.stat().st_size == 0:
        log.error(f"Output missing or empty: {output_path}")
        return False
    try:
        converted = load_track(output_path)
    except MetadataError as e:
        log.error(f"Output not loadable: {output_path}: {e.reason}")
        return False
    if converted.bitrate == 0:
        log.error(f"Output has 0kbps bitrate: {output_path}")
        return False
    return True


def compress_file(path: Path, config: OrganizerConfig) -> TranscodeOutcome:
    """Compress one lossless file in place (same base name, .flac)."""
    if not path.exists():
        log.debug(f"Skipping {path}: no longer exists")
        return TranscodeOutcome.SKIPPED

    try:
        original = load_track(path)
    except MetadataError as e:
        log.error(f"Failed to load track for conversion at {path}: {e.reason}")
        return TranscodeOutcome.FAILED

    if original.bitrate == 0 and path.suffix.lower() == ".flac":
        log.warning(f"Deleting {path} because its bitrate is 0kbps - likely corrupt or incomplete")
        return TranscodeOutcome.DELETED_CORRUPT if _discard(path) else TranscodeOutcome.FAILED

    if original.bitrate < config.compression_threshold_kbps and not config.force_reencode:
        log.debug(f"Skipping {path}: bitrate is low enough ({original.bitrate}kbps)")
        return TranscodeOutcome.SKIPPED

    if not check_disk_space(path, path.parent):
        log.warning(f"Skipping {path}: not enough free disk space")
        return TranscodeOutcome.SKIPPED

    output_path = path.with_suffix(".flac")
    input_path = path
    if output_path == path:
        input_path = path.with_name(f"{path.stem}-temp.flac")
        try:
            move_file(path, input_path, overwrite=True)
        except OSError as e:
            log.error(f"Failed to move {path} aside for conversion: {e}")
            return TranscodeOutcome.FAILED
    elif output_path.exists():
        log.warning(f"Skipping {path}: {output_path.name} already exists")
        return TranscodeOutcome.SKIPPED

    log.info(f"Started conversion for {path}")
    try:
        _run_ffmpeg(input_path, output_path, config.compression_level)
        valid = _output_is_valid(output_path)
    except ExternalToolError as e:
        log.error(f"Failed to convert {path}: {e}")
        valid = False

    if not valid:
        if _discard(output_path):
            _restore(input_path, path)
        return TranscodeOutcome.FAILED

    if config.force_reencode or output_path.stat().st_size <= input_path.stat().st_size:
        if _discard(input_path):
            log.info(f"Converted {path} to {output_path}")
        return TranscodeOutcome.COMPRESSED

    log.info(f"Deleted compressed {output_path} because it was larger than the original")
    if _discard(output_path):
        _restore(input_path, path)
    return TranscodeOutcome.KEPT_ORIGINAL


def compress_files(files: list[Path], config: OrganizerConfig) -> list[TranscodeOutcome]:
    """Compress lossless files in parallel, leaving one CPU free."""
    if not files:
        return []
    max_workers = calculate_max_workers(config.max_workers, reserve=1)
    log.info(f"Found {len(files)} lossless file(s) to compress, max_workers={max_workers}")
    return run_parallel(lambda f: compress_file(f, config), files, max_workers, label="transcode")
