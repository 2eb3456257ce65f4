"""Organizer configuration via pydantic-settings (.env + env vars)."""

import sys
from pathlib import Path

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

_STATE_DIR = Path.home() / ".local" / "state" / "music-organizer"


class OrganizerConfig(BaseSettings):
    """All organizer configuration with layered resolution:
    .env file < environment variables < constructor kwargs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # -- Directories --
    log_dir: Path = _STATE_DIR / "logs"
    lock_dir: Path = _STATE_DIR / "locks"

    # -- Layout --
    use_album_artist: bool = True
    use_disc_subdirectory: bool = False
    playlist_directory: str = "Playlists"
    move_playlists: bool = True

    # -- Discovery and cleanup --
    ignore_hidden_directories: bool = True
    ignore_directories: list[str] = [".stfolder", ".stversions"]
    do_not_delete_directories: list[str] = ["slskd"]

    # -- Conflicts --
    duration_tolerance_ms: int = 1000

    # -- Lossless compression --
    compression_enabled: bool = True
    compression_threshold_kbps: int = 900
    compression_level: int = 8
    force_reencode: bool = False

    # -- Parallelism --
    max_workers: int = 0  # 0 = auto (CPU-based)

    # -- Behavior --
    verbose: bool = False
    log_level: str = "INFO"

    def setup_logging(self) -> None:
        """Configure loguru for the organizer."""
        logger.remove()  # Remove default stderr handler

        log_format = (
            "{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | "
            "{extra[stage]:<12} | {message}"
        )

        def _default_extra(record):
            record["extra"].setdefault("stage", "")
            return True

        logger.add(
            sys.stderr,
            format=log_format,
            level=self.log_level.upper(),
            filter=_default_extra,
        )

        self.log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(self.log_dir / "organizer.log"),
            format=log_format,
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            filter=_default_extra,
        )
