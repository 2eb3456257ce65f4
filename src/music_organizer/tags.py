"""Audio tag reading and writing via mutagen.

load_track() builds a Track snapshot from a file's embedded tags and stream
info. save_track() writes back the only fields the organizer ever changes:
disc number and disc total. Both raise MetadataError on failure.

Files are opened in mutagen's easy mode. Formats without an easy wrapper
(ID3 inside WAV/AIFF, ASF/WMA) expose their native tag containers, so every
field is looked up under its easy key first and its native frame or
attribute names after that.
"""

from __future__ import annotations

import re
from pathlib import Path

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError
from mutagen.asf import ASFTags
from mutagen.easyid3 import EasyID3
from mutagen.easymp4 import EasyMP4Tags
from mutagen.id3 import ID3, TPOS

from .errors import MetadataError
from .models import Track

log = logger.bind(stage="tags")

# EasyID3 has no original artist key out of the box
EasyID3.RegisterTextKey("originalartist", "TOPE")

# easy key(s), ID3 frame(s), ASF attribute
_TITLE = ("title", "TIT2", "Title")
_TRACK_NUMBER = ("tracknumber", "TRCK", "WM/TrackNumber")
_DISC_NUMBER = ("discnumber", "TPOS", "WM/PartOfSet")
_DISC_TOTAL = ("disctotal", "totaldiscs")
_ALBUM = ("album", "TALB", "WM/AlbumTitle")
_ARTIST = ("artist", "TPE1", "Author")
_ALBUM_ARTIST = ("albumartist", "album artist", "album_artist", "TPE2", "WM/AlbumArtist")
_ORIGINAL_ARTIST = ("originalartist", "TOPE", "WM/OriginalArtist")
_COMPOSER = ("composer", "TCOM", "WM/Composer")
_CONDUCTOR = ("conductor", "TPE3", "WM/Conductor")
_YEAR = ("date", "year", "TDRC", "TYER", "WM/Year")


def _first(tags, *keys: str) -> str:
    """Return the first non-empty value for any of keys, stripped.

    Stripping means album strings that differ only in surrounding
    whitespace land in the same album group.
    """
    if tags is None:
        return ""
    for key in keys:
        try:
            value = tags.get(key)
        except (KeyError, ValueError, TypeError):
            continue
        if isinstance(value, list):
            value = value[0] if value else None
        frame_text = getattr(value, "text", None)
        if frame_text is not None:
            # ID3 frame
            value = frame_text[0] if frame_text else None
        elif hasattr(value, "value"):
            # ASF attribute
            value = value.value
        if value:
            text = str(value).strip()
            if text:
                return text
    return ""


def _parse_number(raw: str) -> int | None:
    """Parse '3', '03' or '3/12' into 3. Returns None when unparseable."""
    match = re.match(r"\s*(\d+)", raw)
    return int(match.group(1)) if match else None


def _parse_total(raw: str) -> int | None:
    """Parse the total out of '3/12'. Returns None when absent."""
    match = re.match(r"\s*\d*\s*/\s*(\d+)", raw)
    return int(match.group(1)) if match else None


def _parse_year(raw: str) -> int | None:
    match = re.match(r"\s*(\d{4})", raw)
    return int(match.group(1)) if match else None


def _codec_name(audio) -> str:
    """Short format name such as MP3, FLAC, MP4."""
    name = type(audio).__name__
    return name[4:] if name.startswith("Easy") else name


def load_track(path: Path) -> Track:
    """Read tags and stream info from an audio file into a Track."""
    try:
        audio = MutagenFile(str(path), easy=True)
    except (MutagenError, OSError) as e:
        raise MetadataError(path, str(e)) from e

    if audio is None:
        raise MetadataError(path, "unsupported or unrecognized audio format")

    tags = audio.tags
    info = audio.info

    disc_raw = _first(tags, *_DISC_NUMBER)
    track_raw = _first(tags, *_TRACK_NUMBER)

    disc_total = _parse_total(disc_raw) if disc_raw else None
    if disc_total is None:
        total_raw = _first(tags, *_DISC_TOTAL)
        disc_total = _parse_number(total_raw) if total_raw else None

    bitrate = getattr(info, "bitrate", 0) or 0
    length = getattr(info, "length", 0) or 0

    track = Track(
        path=path,
        title=_first(tags, *_TITLE),
        track_number=_parse_number(track_raw) if track_raw else None,
        disc_number=_parse_number(disc_raw) if disc_raw else None,
        disc_total=disc_total,
        album=_first(tags, *_ALBUM),
        artist=_first(tags, *_ARTIST),
        album_artist=_first(tags, *_ALBUM_ARTIST),
        original_artist=_first(tags, *_ORIGINAL_ARTIST),
        composer=_first(tags, *_COMPOSER),
        conductor=_first(tags, *_CONDUCTOR),
        year=_parse_year(_first(tags, *_YEAR)),
        bitrate=int(bitrate) // 1000,
        duration_ms=int(length * 1000),
        bit_depth=getattr(info, "bits_per_sample", None),
        codec=_codec_name(audio),
    )
    log.debug(f"Loaded track {path}")
    return track


def save_track(track: Track) -> None:
    """Write disc number and disc total from track back to its file.

    ID3, MP4 and ASF keep both in one 'n/total' field (TPOS, disk,
    WM/PartOfSet); Vorbis-comment formats (FLAC, Ogg) use separate
    discnumber and disctotal fields.
    """
    log.debug(f"save_track: {track.path} disc={track.disc_number}/{track.disc_total}")
    try:
        audio = MutagenFile(str(track.path), easy=True)
        if audio is None:
            raise MetadataError(track.path, "unsupported or unrecognized audio format")
        if audio.tags is None:
            audio.add_tags()

        if track.disc_number is not None:
            tags = audio.tags
            combined = str(track.disc_number)
            if track.disc_total is not None:
                combined = f"{track.disc_number}/{track.disc_total}"

            if isinstance(tags, (EasyID3, EasyMP4Tags)):
                tags["discnumber"] = combined
            elif isinstance(tags, ID3):
                tags.setall("TPOS", [TPOS(encoding=3, text=[combined])])
            elif isinstance(tags, ASFTags):
                tags["WM/PartOfSet"] = combined
            else:
                tags["discnumber"] = str(track.disc_number)
                if track.disc_total is not None:
                    tags["disctotal"] = str(track.disc_total)

        audio.save()
    except (MutagenError, OSError, KeyError, ValueError, TypeError) as e:
        raise MetadataError(track.path, f"failed to save tags: {e}") from e

    log.info(f"Saved disc metadata for {track.path}")
