"""Decide which artist folder an album belongs under."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from loguru import logger

from ..models import UNKNOWN_ARTIST, VARIOUS_ARTISTS, Track

log = logger.bind(stage="artist")

# More distinct artists than this is a compilation, no counting needed
_MAX_COUNTED_ARTISTS = 4


@dataclass(frozen=True)
class ArtistDecision:
    artist: str
    use_artist_subdirectory: bool = True


def effective_artist(track: Track, use_album_artist: bool) -> str:
    """Pick the artist string for one track.

    Primary field (album artist or artist), then the other one, then
    original artist, composer, conductor, and finally "Unknown Artist".
    """
    if use_album_artist:
        candidates = (track.album_artist, track.artist)
    else:
        candidates = (track.artist, track.album_artist)
    candidates += (track.original_artist, track.composer, track.conductor)

    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate
    return UNKNOWN_ARTIST


def split_artists(value: str) -> list[str]:
    """Split a ';'-separated artist string into trimmed, non-blank names."""
    return [part.strip() for part in value.split(";") if part.strip()]


def _prefer_capitalized(current: str, candidate: str) -> str:
    if not current[0].isupper() and candidate[0].isupper():
        return candidate
    return current


def resolve_album_artist(tracks: list[Track], use_album_artist: bool) -> ArtistDecision:
    """Resolve the representative artist for the tracks of one album.

    Sub-artists are compared case-insensitively; the spelling that starts
    with an uppercase letter is reported when variants differ only by case.

    1 distinct artist   -> that artist
    2-4 distinct        -> the most frequent one, "Various Artists" on a tie
                           between the top two
    >4 distinct         -> "Various Artists"
    """
    occurrences: list[str] = []
    for track in tracks:
        occurrences.extend(split_artists(effective_artist(track, use_album_artist)))

    spellings: dict[str, str] = {}
    for name in occurrences:
        key = name.casefold()
        spellings[key] = _prefer_capitalized(spellings[key], name) if key in spellings else name

    if not spellings:
        decision = ArtistDecision(UNKNOWN_ARTIST)
    elif len(spellings) == 1:
        decision = ArtistDecision(next(iter(spellings.values())))
    elif len(spellings) > _MAX_COUNTED_ARTISTS:
        decision = ArtistDecision(VARIOUS_ARTISTS)
    else:
        counts = Counter(name.casefold() for name in occurrences)
        (top, top_count), (_, runner_up_count) = counts.most_common(2)
        if top_count == runner_up_count:
            decision = ArtistDecision(VARIOUS_ARTISTS)
        else:
            decision = ArtistDecision(spellings[top])

    log.debug(
        f"resolve_album_artist: {len(tracks)} track(s), "
        f"{len(spellings)} distinct artist(s) -> {decision.artist!r}"
    )
    return decision
