"""Order and OrderStatusHistory models.

Business rules implemented:
- ``Order.status`` holds a status slug as plain text (no FK), so deleting a
  status never rewrites or orphans the audit trail.
- ``Order.status`` always equals ``to_status`` of the order's latest history
  row; both are written in the same transaction by the service layer.
- ``paid_at`` is stamped the first time the order enters a paid status.
- Order number auto-generated as human-readable identifier.
- History rows are append-only (``AppendOnlyModel``).
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any

from django.db import models
from django.utils import timezone

from modules.core.models import AppendOnlyModel, BaseModel
from modules.orders.constants import ORDER_NUMBER_MAX_RETRIES


class Order(BaseModel):
    """The part of a storefront order the status workflow needs.

    ``order_number`` is a human-readable identifier auto-generated on first
    save (format: ``ORD-YYYYMMDD-XXXXXX``).  The UUIDv7 ``id`` is used for
    all internal references and API lookups.
    """

    order_number: models.CharField = models.CharField(
        max_length=20, unique=True, editable=False
    )
    customer_name: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )
    customer_email: models.EmailField = models.EmailField(blank=True, default="")
    total_amount: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    tracking_number: models.CharField = models.CharField(
        max_length=100, blank=True, default=""
    )
    status: models.CharField = models.CharField(max_length=50)
    paid_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="orders_status_created_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number() -> str:
        """Generate a human-readable order number: ``ORD-YYYYMMDD-XXXXXX``."""
        now = timezone.now()
        suffix = secrets.token_hex(3).upper()
        return f"ORD-{now:%Y%m%d}-{suffix}"

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            for attempt in range(ORDER_NUMBER_MAX_RETRIES):
                candidate = self.generate_order_number()
                if not Order.objects.filter(order_number=candidate).exists():
                    self.order_number = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique order_number after "
                    f"{ORDER_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderStatusHistory(AppendOnlyModel):
    """Append-only audit trail for order status changes.

    ``from_status`` is ``None`` only for the row written when the order is
    created.  Status values are slugs copied at write time, so a row keeps
    its meaning after the status itself has been deleted.  ``changed_by`` is
    a free-text actor name; ``"System"`` marks automated changes such as
    reassignment on status deletion.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    from_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=50,
        null=True,
        blank=True,
    )
    to_status: models.CharField = models.CharField(max_length=50)
    notes: models.TextField = models.TextField(blank=True, default="")
    changed_by: models.CharField = models.CharField(max_length=255, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["order", "created_at"],
                name="osh_order_created_idx",
            ),
            models.Index(fields=["created_at"], name="osh_created_idx"),
        ]

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.order_id} : {self.from_status} -> {self.to_status}"
