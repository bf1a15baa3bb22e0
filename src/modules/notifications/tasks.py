"""Asynchronous notification delivery."""

from smtplib import SMTPException

import structlog
from celery import shared_task

from modules.notifications.dispatcher import NotificationDispatcher

logger = structlog.get_logger(__name__)


@shared_task(
    name="notifications.dispatch_status_entered",
    autoretry_for=(SMTPException, ConnectionError),
    retry_backoff=True,
    retry_backoff_max=600,
    retry_jitter=True,
    max_retries=3,
)
def dispatch_status_entered(order_id: str, status_slug: str, notes: str = "") -> bool:
    """Send the "status entered" e-mail; transport errors are retried with backoff."""
    sent = NotificationDispatcher().status_entered(order_id, status_slug, notes)
    logger.info(
        "notification.task_completed",
        order_id=order_id,
        status=status_slug,
        sent=sent,
    )
    return sent
