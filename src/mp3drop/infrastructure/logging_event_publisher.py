"""Logging-backed implementation of the event publisher."""

from __future__ import annotations

import logging

from mp3drop.domain.events import DomainEvent, UploadRejected

LOGGER = logging.getLogger("mp3drop.events")


class LoggingEventPublisher:
    """Emit upload lifecycle events as structured log records.

    Rejections are logged at WARNING so abuse attempts stand out from the
    steady stream of successful publishes.
    """

    def __init__(self, logger: logging.Logger = LOGGER) -> None:
        self._logger = logger

    def publish(self, event: DomainEvent) -> None:
        level = logging.WARNING if isinstance(event, UploadRejected) else logging.INFO
        self._logger.log(
            level,
            "domain_event_emitted",
            extra={
                "event_name": type(event).__name__,
                "correlation_id": event.correlation_id,
                "payload_summary": event.payload_summary,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )
