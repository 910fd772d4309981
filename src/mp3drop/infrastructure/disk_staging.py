"""Filesystem adapters for staging, discarding and sweeping uploads."""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from mp3drop.domain.models import StagedFile

logger = logging.getLogger(__name__)

_RANDOM_SUFFIX_BOUND = 1_000_000_000


class StagingError(OSError):
    """Raised when an upload cannot be durably written."""


def generate_upload_name(field_name: str, extension: str = "") -> str:
    """Build ``<field>-<epoch ms>-<random>`` with an optional extension."""

    timestamp_ms = time.time_ns() // 1_000_000
    return f"{field_name}-{timestamp_ms}-{secrets.randbelow(_RANDOM_SUFFIX_BOUND)}{extension}"


@dataclass(frozen=True, slots=True)
class DiskStager:
    """Write upload bytes under a generated, collision-checked name."""

    upload_dir: Path
    field_name: str = "mp3file"
    extension: str = ".mp3"
    max_attempts: int = 5
    name_factory: Callable[[str, str], str] = generate_upload_name

    def stage(self, payload: bytes) -> StagedFile:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        for attempt in range(1, self.max_attempts + 1):
            name = self.name_factory(self.field_name, self.extension)
            path = self.upload_dir / name
            try:
                with path.open("xb") as handle:
                    handle.write(payload)
            except FileExistsError:
                logger.info("Staged name collision, retrying", extra={"staged_name": name, "attempt": attempt})
                continue
            except OSError as exc:
                discard_file(path, reason="staging_write_failed")
                raise StagingError(f"Failed to write upload to {path}") from exc
            return StagedFile(name=name, path=path.resolve(), size_bytes=len(payload))

        raise StagingError(f"Could not allocate a unique upload name after {self.max_attempts} attempts")


def discard_file(path: Path, *, reason: str) -> bool:
    """Best-effort delete; failures are logged and never raised."""

    try:
        path.unlink(missing_ok=True)
    except OSError as error:
        logger.warning("Failed to delete upload file", extra={"path": str(path), "reason": reason}, exc_info=error)
        return False
    logger.debug("Deleted upload file", extra={"path": str(path), "reason": reason})
    return True


def sweep_upload_dir(upload_dir: Path, keep: Path | None = None) -> list[Path]:
    """Delete every regular file in ``upload_dir`` except ``keep``."""

    if not upload_dir.is_dir():
        return []

    keep_resolved = keep.resolve() if keep is not None else None
    removed: list[Path] = []
    for entry in sorted(upload_dir.iterdir()):
        if not entry.is_file() or entry.resolve() == keep_resolved:
            continue
        if discard_file(entry, reason="orphan_sweep"):
            removed.append(entry)

    if removed:
        logger.info("Swept orphaned uploads", extra={"upload_dir": str(upload_dir), "removed_count": len(removed)})
    return removed
