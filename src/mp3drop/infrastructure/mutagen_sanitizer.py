"""Mutagen-backed MP3 metadata parsing and tag stripping."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from mutagen import MutagenError
from mutagen import apev2, id3
from mutagen.mp3 import MP3

logger = logging.getLogger(__name__)


class SanitizationError(ValueError):
    """Raised when a staged file is not a well-formed MP3 or cannot be stripped."""


@dataclass(frozen=True, slots=True)
class StreamInfo:
    duration_seconds: float
    bitrate_bps: int
    sample_rate_hz: int
    channel_count: int
    removed_frame_ids: tuple[str, ...]


def parse_stream(path: Path) -> MP3:
    """Fully parse tags and the MPEG stream; a truncated or corrupt file fails."""

    try:
        audio = MP3(str(path))
    except (MutagenError, OSError) as exc:
        raise SanitizationError(f"Could not parse MP3 stream: {exc}") from exc

    if audio.info.length <= 0 or audio.info.sample_rate <= 0:
        raise SanitizationError("MP3 stream reports no playable audio.")
    return audio


def sanitize(path: Path) -> StreamInfo:
    """Parse ``path`` then strip ID3v1, ID3v2 and APEv2 tags in place."""

    audio = parse_stream(path)
    removed_frame_ids = tuple(sorted(audio.tags.keys())) if audio.tags is not None else ()

    try:
        id3.delete(str(path))
        apev2.delete(str(path))
    except (MutagenError, OSError) as exc:
        raise SanitizationError(f"Could not strip tags: {exc}") from exc

    stripped = parse_stream(path)
    if stripped.tags is not None and len(stripped.tags) > 0:
        raise SanitizationError("Tags are still present after stripping.")

    logger.debug(
        "Stripped embedded metadata",
        extra={"path": str(path), "removed_frame_ids": removed_frame_ids},
    )
    return StreamInfo(
        duration_seconds=stripped.info.length,
        bitrate_bps=stripped.info.bitrate,
        sample_rate_hz=stripped.info.sample_rate,
        channel_count=stripped.info.channels,
        removed_frame_ids=removed_frame_ids,
    )
