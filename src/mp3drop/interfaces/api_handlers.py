"""API-facing handlers that delegate to application services."""

from __future__ import annotations

from fastapi import UploadFile

from mp3drop.application.retention import InMemoryRetentionSlot, RetentionSlot
from mp3drop.application.upload_service import UploadPipeline
from mp3drop.config import Settings
from mp3drop.domain.models import RejectionReason, UploadCandidate
from mp3drop.infrastructure.disk_staging import DiskStager
from mp3drop.infrastructure.logging_event_publisher import LoggingEventPublisher


_event_publisher = LoggingEventPublisher()

REJECTION_STATUS_CODES: dict[RejectionReason, int] = {
    RejectionReason.INVALID_TYPE: 415,
    RejectionReason.TOO_LARGE: 413,
    RejectionReason.IO_ERROR: 500,
}


def status_code_for(reason: RejectionReason) -> int:
    return REJECTION_STATUS_CODES.get(reason, 400)


def build_upload_pipeline(settings: Settings, retention_slot: RetentionSlot | None = None) -> UploadPipeline:
    stager = DiskStager(
        upload_dir=settings.upload_dir,
        field_name=settings.upload_field_name,
        extension=settings.expected_extension,
        max_attempts=settings.staging_attempts,
    )
    return UploadPipeline(
        stager=stager,
        retention_slot=retention_slot or InMemoryRetentionSlot(),
        policy=settings.upload_policy(),
        public_path_for=settings.public_path_for,
        event_publisher=_event_publisher,
    )


async def read_candidate(upload: UploadFile, max_file_size_bytes: int) -> UploadCandidate:
    """Read at most one byte past the ceiling so the pipeline never holds more than the limit."""

    payload = await upload.read(max_file_size_bytes + 1)
    return UploadCandidate(
        payload=payload,
        declared_mime_type=upload.content_type,
        declared_filename=upload.filename,
    )


__all__ = ["build_upload_pipeline", "read_candidate", "status_code_for"]
