"""Public package exports for mp3drop with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "InMemoryRetentionSlot",
    "PublishedFile",
    "RejectionReason",
    "Settings",
    "StagedFile",
    "UploadCandidate",
    "UploadOutcome",
    "UploadPipeline",
    "UploadPolicy",
    "UploadValidationError",
    "check_signature",
    "load_settings",
    "sanitize",
    "validate_candidate",
]

_EXPORT_MODULES: dict[str, str] = {
    "InMemoryRetentionSlot": "mp3drop.application.retention",
    "PublishedFile": "mp3drop.domain.models",
    "RejectionReason": "mp3drop.domain.models",
    "Settings": "mp3drop.config",
    "StagedFile": "mp3drop.domain.models",
    "UploadCandidate": "mp3drop.domain.models",
    "UploadOutcome": "mp3drop.application.upload_service",
    "UploadPipeline": "mp3drop.application.upload_service",
    "UploadPolicy": "mp3drop.upload_validation",
    "UploadValidationError": "mp3drop.upload_validation",
    "check_signature": "mp3drop.upload_validation",
    "load_settings": "mp3drop.config",
    "sanitize": "mp3drop.infrastructure.mutagen_sanitizer",
    "validate_candidate": "mp3drop.upload_validation",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'mp3drop' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
