"""Application service orchestrating the upload-and-publish use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol
from uuid import uuid4

from mp3drop.application.event_publisher import EventPublisher, NullEventPublisher
from mp3drop.application.retention import RetentionSlot
from mp3drop.domain.events import PublishedFileSuperseded, UploadPublished, UploadRejected, UploadStaged
from mp3drop.domain.models import PublishedFile, RejectionReason, StagedFile, UploadCandidate
from mp3drop.infrastructure.disk_staging import discard_file
from mp3drop.infrastructure.mutagen_sanitizer import SanitizationError, StreamInfo, sanitize
from mp3drop.upload_validation import UploadPolicy, UploadValidationError, check_signature, validate_candidate

logger = logging.getLogger(__name__)


class UploadStager(Protocol):
    """Port for writing unverified upload bytes to durable storage."""

    def stage(self, payload: bytes) -> StagedFile:
        """Persist ``payload`` under a generated name."""


@dataclass(frozen=True, slots=True)
class UploadRejection:
    reason: RejectionReason
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"code": self.reason.value, "message": self.message}


@dataclass(frozen=True, slots=True)
class UploadOutcome:
    """Tagged result of one pipeline run: either ``published`` or ``rejection`` is set."""

    correlation_id: str
    published: PublishedFile | None = None
    superseded: PublishedFile | None = None
    rejection: UploadRejection | None = None

    @property
    def ok(self) -> bool:
        return self.published is not None


def _default_public_path(name: str) -> str:
    return f"/uploads/{name}"


@dataclass(slots=True)
class UploadPipeline:
    """Validate, stage, verify, sanitize and publish a single upload.

    The retention slot is only touched after every check has passed, and the
    superseded file is deleted only after the swap. Nothing raised by a stage
    escapes ``run``; failures come back as an ``UploadOutcome`` rejection.
    """

    stager: UploadStager
    retention_slot: RetentionSlot
    policy: UploadPolicy = field(default_factory=UploadPolicy)
    public_path_for: Callable[[str], str] = _default_public_path
    signature_checker: Callable[[Path, bytes], bool] = check_signature
    sanitizer: Callable[[Path], StreamInfo] = sanitize
    event_publisher: EventPublisher = NullEventPublisher()

    def run(self, candidate: UploadCandidate, correlation_id: str | None = None) -> UploadOutcome:
        run_correlation_id = correlation_id or str(uuid4())

        try:
            validate_candidate(candidate, self.policy)
        except UploadValidationError as error:
            return self._reject(run_correlation_id, error.code, error.message, candidate=candidate)

        try:
            staged = self.stager.stage(candidate.payload)
        except OSError as error:
            logger.error("Failed to stage upload", exc_info=error)
            return self._reject(
                run_correlation_id,
                RejectionReason.IO_ERROR,
                "Failed to store the uploaded file.",
                candidate=candidate,
            )

        self.event_publisher.publish(
            UploadStaged(
                correlation_id=run_correlation_id,
                payload_summary={"staged_name": staged.name, "size_bytes": staged.size_bytes},
            )
        )

        rejection = self._verify(staged)
        if rejection is not None:
            discard_file(staged.path, reason=rejection.reason.value)
            return self._reject(run_correlation_id, rejection.reason, rejection.message, staged=staged)

        return self._commit(run_correlation_id, staged)

    def _verify(self, staged: StagedFile) -> UploadRejection | None:
        try:
            if not self.signature_checker(staged.path, self.policy.signature):
                return UploadRejection(
                    RejectionReason.INVALID_CONTENT,
                    "File content does not match the expected audio format.",
                )
            self.sanitizer(staged.path)
        except SanitizationError as error:
            logger.info("Staged upload failed metadata parsing", extra={"staged_name": staged.name, "error": str(error)})
            return UploadRejection(RejectionReason.PARSE_ERROR, "Error while parsing the file.")
        except OSError as error:
            logger.error("Failed to read staged upload", extra={"staged_name": staged.name}, exc_info=error)
            return UploadRejection(RejectionReason.IO_ERROR, "Failed to read the uploaded file.")
        return None

    def _commit(self, correlation_id: str, staged: StagedFile) -> UploadOutcome:
        published = PublishedFile(
            name=staged.name,
            path=staged.path,
            public_path=self.public_path_for(staged.name),
        )
        previous = self.retention_slot.publish(published)
        self.event_publisher.publish(
            UploadPublished(
                correlation_id=correlation_id,
                payload_summary={"public_path": published.public_path, "size_bytes": staged.size_bytes},
            )
        )

        if previous is not None and previous.path != published.path:
            deleted = discard_file(previous.path, reason="superseded")
            self.event_publisher.publish(
                PublishedFileSuperseded(
                    correlation_id=correlation_id,
                    payload_summary={"previous_name": previous.name, "deleted": deleted},
                )
            )

        return UploadOutcome(correlation_id=correlation_id, published=published, superseded=previous)

    def _reject(
        self,
        correlation_id: str,
        reason: RejectionReason,
        message: str,
        *,
        candidate: UploadCandidate | None = None,
        staged: StagedFile | None = None,
    ) -> UploadOutcome:
        summary: dict[str, object] = {"reason": reason.value}
        if staged is not None:
            summary["staged_name"] = staged.name
        elif candidate is not None:
            summary["size_bytes"] = candidate.size_bytes
        self.event_publisher.publish(UploadRejected(correlation_id=correlation_id, payload_summary=summary))
        return UploadOutcome(correlation_id=correlation_id, rejection=UploadRejection(reason, message))
