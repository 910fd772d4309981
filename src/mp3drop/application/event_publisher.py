"""Ports for publishing upload lifecycle events."""

from __future__ import annotations

from typing import Protocol

from mp3drop.domain.events import DomainEvent


class EventPublisher(Protocol):
    def publish(self, event: DomainEvent) -> None:
        """Deliver one event; must not raise into the upload pipeline."""


class NullEventPublisher:
    """Discards events; the default when no publisher is wired in."""

    def publish(self, event: DomainEvent) -> None:  # noqa: ARG002
        return
