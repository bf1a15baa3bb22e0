"""Notification dispatcher for "status entered" events.

Consumes ``(order_id, status_slug)`` pairs produced by the order status
controller and sends the customer an e-mail when the entered status asks
for one.  The dispatcher runs inside a Celery task, after the status change
has been committed; nothing here may affect the status change itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from modules.notifications.rendering import render_template

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.statuses.models import Status

logger = structlog.get_logger(__name__)

GENERIC_SUBJECT = "Order {{orderNumber}} update: {{statusName}}"
GENERIC_TEXT = (
    "Hi {{customerName}},\n\n"
    "Your order {{orderNumber}} is now: {{statusName}}.\n"
    "{{notes}}\n\n"
    "Order total: {{total}}\n"
    "View your order: {{orderUrl}}\n"
)


class NotificationDispatcher:
    """Render and send the e-mail bound to a status, if any."""

    def __init__(self, from_email: Optional[str] = None) -> None:
        self._from_email = from_email or settings.DEFAULT_FROM_EMAIL

    def status_entered(self, order_id: str, status_slug: str, notes: str = "") -> bool:
        """Send the status e-mail for *order_id*.

        Returns ``True`` when a message was handed to the mail backend and
        ``False`` when there was nothing to send.  Transport errors
        propagate so the Celery task can retry them.
        """
        from modules.orders.models import Order
        from modules.statuses.models import Status

        log = logger.bind(order_id=str(order_id), status=status_slug)

        status = (
            Status.objects.select_related("email_template")
            .filter(slug=status_slug)
            .first()
        )
        if status is None or not status.send_email_on_enter:
            log.debug("notification.skipped", reason="email_disabled")
            return False

        order = Order.objects.filter(id=order_id).first()
        if order is None:
            log.warning("notification.skipped", reason="order_missing")
            return False
        if not order.customer_email:
            log.info("notification.skipped", reason="no_recipient")
            return False

        variables = build_variables(order, status, notes)
        message = self._compose(order, status, variables)
        message.send()

        log.info(
            "notification.sent",
            template=status.email_template.name if status.email_template else None,
        )
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _compose(
        self, order: Order, status: Status, variables: Dict[str, Any]
    ) -> EmailMultiAlternatives:
        template = status.email_template
        if template is None:
            subject = render_template(GENERIC_SUBJECT, variables)
            body = render_template(GENERIC_TEXT, variables)
            return EmailMultiAlternatives(
                subject=subject,
                body=body,
                from_email=self._from_email,
                to=[order.customer_email],
            )

        subject = render_template(template.subject, variables)
        text = render_template(template.text_content, variables)
        message = EmailMultiAlternatives(
            subject=subject,
            body=text or render_template(GENERIC_TEXT, variables),
            from_email=self._from_email,
            to=[order.customer_email],
        )
        if template.html_content:
            message.attach_alternative(
                render_template(template.html_content, variables, html=True),
                "text/html",
            )
        return message


def build_variables(order: Order, status: Status, notes: str = "") -> Dict[str, Any]:
    """Template variables for *order* entering *status*."""
    workflow = settings.STATUS_WORKFLOW
    tracking_url = ""
    if order.tracking_number:
        tracking_url = workflow["TRACKING_URL_TEMPLATE"].format(
            tracking_number=order.tracking_number
        )
    storefront = workflow["STOREFRONT_URL"].rstrip("/")
    return {
        "orderNumber": order.order_number,
        "customerName": order.customer_name,
        "statusName": status.name,
        "trackingNumber": order.tracking_number,
        "trackingUrl": tracking_url,
        "orderUrl": f"{storefront}/orders/{order.id}",
        "notes": notes,
        "total": f"${order.total_amount:,.2f}",
    }
