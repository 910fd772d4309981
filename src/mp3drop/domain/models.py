"""Domain models for the upload, staging and publishing workflow."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class RejectionReason(str, Enum):
    """Why an upload did not become the published file."""

    INVALID_TYPE = "invalid_type"
    TOO_LARGE = "too_large"
    INVALID_NAME = "invalid_name"
    INVALID_CONTENT = "invalid_content"
    PARSE_ERROR = "parse_error"
    IO_ERROR = "io_error"

    @property
    def is_client_error(self) -> bool:
        return self is not RejectionReason.IO_ERROR


@dataclass(frozen=True, slots=True)
class UploadCandidate:
    """A single client-supplied file, owned by the request that received it."""

    payload: bytes
    declared_mime_type: str | None
    declared_filename: str | None

    @property
    def size_bytes(self) -> int:
        return len(self.payload)


@dataclass(frozen=True, slots=True)
class StagedFile:
    """Upload written to durable storage under a generated name, not yet trusted."""

    name: str
    path: Path
    size_bytes: int


@dataclass(frozen=True, slots=True)
class PublishedFile:
    """The file currently exposed to clients."""

    name: str
    path: Path
    public_path: str
