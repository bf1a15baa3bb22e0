"""Event handlers bridging order status events to notification delivery."""

from __future__ import annotations

import structlog

from modules.notifications.tasks import dispatch_status_entered
from modules.orders.events import StatusEntered
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class StatusEnteredHandler(IEventHandler[StatusEntered]):
    """Queue the status e-mail for delivery.

    Enqueue failures (broker down, eager task blowing up) are logged and
    dropped: the status change that produced the event is already committed.
    """

    def handle(self, event: StatusEntered) -> None:
        try:
            dispatch_status_entered.delay(
                str(event.aggregate_id), event.status_slug, event.notes
            )
        except Exception as exc:
            logger.warning(
                "notification.enqueue_failed",
                order_id=str(event.aggregate_id),
                status=event.status_slug,
                error=str(exc),
            )
            return
        logger.info(
            "notification.enqueued",
            order_id=str(event.aggregate_id),
            status=event.status_slug,
        )


status_entered_handler = StatusEnteredHandler()
