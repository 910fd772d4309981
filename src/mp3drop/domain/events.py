"""Domain event contracts for upload workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base domain event emitted by application services."""

    correlation_id: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class UploadStaged(DomainEvent):
    """Upload bytes were written to the upload directory."""


@dataclass(frozen=True, slots=True)
class UploadRejected(DomainEvent):
    """Upload failed validation, verification or staging."""


@dataclass(frozen=True, slots=True)
class UploadPublished(DomainEvent):
    """A sanitized upload replaced the published file."""


@dataclass(frozen=True, slots=True)
class PublishedFileSuperseded(DomainEvent):
    """The previously published file was removed after a replacement was published."""
