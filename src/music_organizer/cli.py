"""CLI entry point for the music organizer."""

import os
from pathlib import Path

import click
from loguru import logger

from .concurrency import LockError
from .config import OrganizerConfig
from .runner import OrganizerRunner

log = logger.bind(stage="cli")


def _find_config_file() -> Path | None:
    """Look for .env next to the package or in cwd."""
    pkg_dir = Path(__file__).resolve().parent
    for candidate in [
        pkg_dir.parent.parent / ".env",  # dev: src/../.env
        Path.cwd() / ".env",
    ]:
        if candidate.is_file():
            return candidate
    return None


def _load_env_file(env_file: Path) -> None:
    """Load a shell-style .env file into os.environ (without overriding)."""
    for line in env_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip()
        # Strip quotes
        if (value.startswith('"') and value.endswith('"')) or (
            value.startswith("'") and value.endswith("'")
        ):
            value = value[1:-1]
        # Skip bash variable expansions like ${VAR:-default}
        if "${" in value:
            continue
        # Don't override existing env vars (CLI > env > file)
        if key not in os.environ:
            os.environ[key] = value


@click.command()
@click.argument(
    "music_directory",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "--no-compress",
    is_flag=True,
    help="Skip re-encoding lossless files after organizing.",
)
@click.option("--no-lock", is_flag=True, help="Skip file locking.")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True),
    default=None,
    help="Path to .env file.",
)
def main(
    music_directory: str,
    verbose: bool,
    no_compress: bool,
    no_lock: bool,
    config_file: str | None,
) -> None:
    """Organize a music library into Artist/Album/Track folders."""
    root = Path(music_directory).resolve()

    # Load .env into environment before OrganizerConfig reads env vars
    env_file = Path(config_file) if config_file else _find_config_file()
    if env_file and env_file.is_file():
        _load_env_file(env_file)
        log.debug(f"Loaded env from {env_file}")
    else:
        log.debug("No .env found")

    # Pass CLI flags as kwargs to avoid env pollution
    config_kwargs: dict[str, bool | str] = {"verbose": verbose}
    if verbose:
        config_kwargs["log_level"] = "DEBUG"
    if no_compress:
        config_kwargs["compression_enabled"] = False

    config = OrganizerConfig(**config_kwargs)  # type: ignore[arg-type]
    config.setup_logging()

    log.info(f"Starting organizer: root={root}")
    try:
        summary = OrganizerRunner(config).run(root, skip_lock=no_lock)
    except LockError as e:
        raise click.ClickException(str(e))

    click.echo(
        f"Organized {summary.tracks_loaded} track(s): "
        f"{summary.moved} moved, {summary.unchanged} already in place, "
        f"{summary.failed} failed, {summary.load_failures} unreadable"
    )
    click.echo(
        f"Conflicts: {summary.conflicts_resolved}/{summary.conflicts} resolved. "
        f"Stray files moved: {summary.strays_moved}. "
        f"Empty directories removed: {summary.directories_pruned}."
    )
    if summary.playlists_moved:
        click.echo(f"Playlists moved: {summary.playlists_moved}")
    if config.compression_enabled:
        click.echo(f"Lossless files compressed: {summary.compressed}")
