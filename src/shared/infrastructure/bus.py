"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

import structlog
from django.db import transaction

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """In-process event bus with per-handler failure isolation.

    A handler that raises is logged and skipped; the remaining handlers
    still receive the event and the publisher never sees the error.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.get(event_class, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: DomainEvent) -> None:
        for handler in list(self._handlers.get(type(event), [])):
            try:
                handler.handle(event)
            except Exception as exc:
                logger.warning(
                    "event_bus.handler_failed",
                    event_name=event.event_name,
                    aggregate_id=str(event.aggregate_id),
                    handler=type(handler).__name__,
                    error=str(exc),
                )


# Global bus instance (singleton)

event_bus = InMemoryEventBus()


def publish_on_commit(event: DomainEvent) -> None:
    """Publish *event* once the surrounding transaction commits.

    Outside an atomic block Django runs the callback immediately.  A rolled
    back transaction drops the event.
    """
    transaction.on_commit(lambda: event_bus.publish(event))
