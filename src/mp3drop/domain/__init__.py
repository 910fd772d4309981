"""DDD domain layer."""

from .events import DomainEvent, PublishedFileSuperseded, UploadPublished, UploadRejected, UploadStaged
from .models import PublishedFile, RejectionReason, StagedFile, UploadCandidate

__all__ = [
    "DomainEvent",
    "UploadStaged",
    "UploadRejected",
    "UploadPublished",
    "PublishedFileSuperseded",
    "PublishedFile",
    "RejectionReason",
    "StagedFile",
    "UploadCandidate",
]
