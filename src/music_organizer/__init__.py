"""Music Organizer -- sort an audio library into Artist/Album/Track folders.

Core modules:
    config      -- Organizer configuration via pydantic-settings (.env + env vars)
    cli         -- Click CLI entry point. CLI flags passed as kwargs to
                   OrganizerConfig (no env pollution).
    runner      -- One organizing pass: discovery, tag loading, album fan-out,
                   conflict resolution, stray relocation, pruning, compression
    models      -- Track/TrackConflict/MoveRecord records, outcome enums, and
                   extension sets
    tags        -- Tag reading and disc tag writing via mutagen. Raises
                   MetadataError on unreadable or unsupported files.
    scanner     -- File discovery with hidden/ignored directory filtering and
                   audio/lossless/playlist classification
    sanitize    -- File and directory name sanitization for filesystem safety
    concurrency -- Global run lock, disk space checks, and the thread-pool task
                   group used for album, load, and transcode fan-out
    transcode   -- Lossless re-encoding to FLAC via ffmpeg subprocess

Subpackages:
    ops -- Organizing operations (artist resolution, path building, conflicts,
           stray files, pruning, playlists)
"""
