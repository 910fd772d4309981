from __future__ import annotations

from pathlib import Path

import pytest
from mutagen.id3 import COMM, ID3, TENC, TIT2, TPE1

from mp3drop.application.retention import InMemoryRetentionSlot
from mp3drop.application.upload_service import UploadPipeline
from mp3drop.config import Settings
from mp3drop.infrastructure.disk_staging import DiskStager


def make_mp3_frames(*, bitrate_kbps: int = 128, sample_rate: int = 44_100, seconds: float = 0.5) -> bytes:
    bitrate_idx = {64: 5, 128: 9, 192: 11, 320: 14}[bitrate_kbps]
    sample_idx = {44_100: 0, 48_000: 1, 32_000: 2}[sample_rate]
    header = 0
    header |= 0x7FF << 21
    header |= 0x3 << 19  # MPEG-1
    header |= 0x1 << 17  # Layer III
    header |= 0x1 << 16  # no CRC
    header |= bitrate_idx << 12
    header |= sample_idx << 10
    header |= 0 << 6  # stereo
    frame_len = (144_000 * bitrate_kbps) // sample_rate
    frame = header.to_bytes(4, "big") + b"\x00" * (frame_len - 4)
    frame_count = max(4, int(seconds * sample_rate / 1152))
    return frame * frame_count


class RecordingPublisher:
    def __init__(self) -> None:
        self.events = []

    def publish(self, event) -> None:
        self.events.append(event)


@pytest.fixture
def mp3_frames() -> bytes:
    return make_mp3_frames()


@pytest.fixture
def make_tagged_mp3(tmp_path: Path, mp3_frames: bytes):
    """Build MP3 bytes carrying identifying ID3v2 frames ahead of ``mp3_frames``."""

    source_dir = tmp_path / "sources"
    source_dir.mkdir()
    counter = {"value": 0}

    def _make(*, title: str = "Private Demo", artist: str = "Uploader Name") -> bytes:
        counter["value"] += 1
        path = source_dir / f"source-{counter['value']}.mp3"
        path.write_bytes(mp3_frames)
        tags = ID3()
        tags.add(TIT2(encoding=3, text=title))
        tags.add(TPE1(encoding=3, text=artist))
        tags.add(COMM(encoding=3, lang="eng", desc="", text="Recorded on my phone"))
        tags.add(TENC(encoding=3, text="HomeStudio 2.1"))
        tags.save(str(path))
        return path.read_bytes()

    return _make


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path: Path, upload_dir: Path) -> Settings:
    return Settings(upload_dir=upload_dir, public_dir=tmp_path / "public")


@pytest.fixture
def recording_publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def pipeline(settings: Settings, recording_publisher: RecordingPublisher) -> UploadPipeline:
    return UploadPipeline(
        stager=DiskStager(upload_dir=settings.upload_dir),
        retention_slot=InMemoryRetentionSlot(),
        policy=settings.upload_policy(),
        public_path_for=settings.public_path_for,
        event_publisher=recording_publisher,
    )
