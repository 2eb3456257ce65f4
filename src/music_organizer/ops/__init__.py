"""File operations for the music organizer.

Submodules:
    artist    -- Per-album artist resolution. Effective artist fallback chain
                 (album artist / artist / original artist / composer / conductor),
                 ';'-split sub-artists with case-insensitive dedup, and the
                 1 / 2-4 / >4 distinct-artist policy (tie -> Various Artists).
    paths     -- Canonical destination paths. Title repair for repeated numeric
                 prefixes, "NN. Title.ext" naming, "YYYY - Album" directories,
                 multi-disc prefixes and optional "Disc N" subdirectories, disc
                 tag backfill with a separate needs_persist flag, and placement
                 (move, no-op, or conflict).
    organize  -- Album grouping and the parallel per-album fan-out. Workers
                 return AlbumResult values that are merged after all finish.
    conflicts -- Symmetric conflict dedup and the bitrate/duration quality
                 policy (replace, discard, or keep both on duration mismatch).
    strays    -- Replays move records so non-audio files follow their tracks,
                 mirroring subdirectories under the new album directory.
    prune     -- Depth-first empty directory removal with ignored and protected
                 directory names.
    playlists -- Moves playlist files into a single root-level directory.
    files     -- Move/delete primitives and platform-aware path comparison.
"""
