from __future__ import annotations

import logging

from mp3drop.domain.events import UploadPublished, UploadRejected
from mp3drop.infrastructure.logging_event_publisher import LoggingEventPublisher


class _CapturingHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def _publisher_with_handler() -> tuple[LoggingEventPublisher, _CapturingHandler]:
    logger = logging.getLogger("mp3drop.tests.events")
    logger.setLevel(logging.DEBUG)
    handler = _CapturingHandler()
    logger.handlers = [handler]
    logger.propagate = False
    return LoggingEventPublisher(logger=logger), handler


def test_published_events_log_at_info_with_summary() -> None:
    publisher, handler = _publisher_with_handler()

    publisher.publish(UploadPublished(correlation_id="corr-1", payload_summary={"public_path": "/uploads/a.mp3"}))

    record = handler.records[0]
    assert record.levelno == logging.INFO
    assert record.getMessage() == "domain_event_emitted"
    assert record.event_name == "UploadPublished"
    assert record.correlation_id == "corr-1"
    assert record.payload_summary == {"public_path": "/uploads/a.mp3"}


def test_rejections_log_at_warning() -> None:
    publisher, handler = _publisher_with_handler()

    publisher.publish(UploadRejected(correlation_id="corr-2", payload_summary={"reason": "invalid_content"}))

    assert handler.records[0].levelno == logging.WARNING
    assert handler.records[0].event_name == "UploadRejected"
