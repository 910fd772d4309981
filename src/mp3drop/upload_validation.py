"""Upload validation service.

Request metadata (declared type, size and filename) is checked before anything
touches the upload directory. Once bytes are staged, the leading content
signature is the only server-verified proof of the container format.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re

from mp3drop.domain.models import RejectionReason, UploadCandidate


ID3_SIGNATURE = b"ID3"
DEFAULT_MIME_TYPE = "audio/mpeg"
DEFAULT_EXTENSION = ".mp3"
DEFAULT_MAX_FILE_SIZE_BYTES = 7_000_000
DEFAULT_MAX_FILENAME_LENGTH = 70

_FILENAME_STEM_PATTERN = r"[A-Za-z0-9_() .\-]+"


@dataclass(frozen=True, slots=True)
class UploadPolicy:
    expected_mime_type: str = DEFAULT_MIME_TYPE
    expected_extension: str = DEFAULT_EXTENSION
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES
    max_filename_length: int = DEFAULT_MAX_FILENAME_LENGTH
    signature: bytes = ID3_SIGNATURE

    @property
    def filename_pattern(self) -> re.Pattern[str]:
        return re.compile(_FILENAME_STEM_PATTERN + re.escape(self.expected_extension), re.ASCII)


@dataclass(frozen=True, slots=True)
class UploadValidationError(ValueError):
    code: RejectionReason
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}


def validate_candidate(candidate: UploadCandidate, policy: UploadPolicy | None = None) -> None:
    """Reject a candidate on the first failing check: type, then size, then name."""

    policy = policy or UploadPolicy()
    if candidate.declared_mime_type != policy.expected_mime_type:
        raise UploadValidationError(
            RejectionReason.INVALID_TYPE,
            f"Invalid file type. Only {policy.expected_mime_type} uploads are allowed.",
        )

    if candidate.size_bytes >= policy.max_file_size_bytes:
        raise UploadValidationError(
            RejectionReason.TOO_LARGE,
            f"File must be smaller than {policy.max_file_size_bytes} bytes.",
        )

    _check_filename(candidate.declared_filename, policy)


def _check_filename(filename: str | None, policy: UploadPolicy) -> None:
    if not filename or len(filename) > policy.max_filename_length:
        raise UploadValidationError(
            RejectionReason.INVALID_NAME,
            f"Filename must be between 1 and {policy.max_filename_length} characters.",
        )
    if policy.filename_pattern.fullmatch(filename) is None:
        raise UploadValidationError(
            RejectionReason.INVALID_NAME,
            "Filename may only contain letters, digits, spaces, '-', '_', '(', ')', '.' "
            f"and must end with {policy.expected_extension}.",
        )


def check_signature(path: Path, signature: bytes = ID3_SIGNATURE) -> bool:
    """Return whether the file starts with ``signature``.

    A mismatch, including a file shorter than the signature, is a rejection
    outcome rather than an error. Read failures propagate as ``OSError``.
    """

    with path.open("rb") as handle:
        head = handle.read(len(signature))
    return head == signature
