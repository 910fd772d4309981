"""DDD application layer."""

from .event_publisher import EventPublisher, NullEventPublisher
from .retention import InMemoryRetentionSlot, RetentionSlot
from .upload_service import UploadOutcome, UploadPipeline, UploadRejection

__all__ = [
    "EventPublisher",
    "NullEventPublisher",
    "InMemoryRetentionSlot",
    "RetentionSlot",
    "UploadOutcome",
    "UploadPipeline",
    "UploadRejection",
]
