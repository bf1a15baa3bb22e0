"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  The service
layer owns the transaction boundary: a status change writes the order row
and its history row inside the caller's ``transaction.atomic`` block.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order row.

        ``data`` keys: ``status`` (required), ``customer_name``,
        ``customer_email``, ``total_amount``, ``tracking_number``,
        ``paid_at`` (optional).
        """
        order = Order(**data)
        order.save()
        logger.info("order.created", order_id=str(order.id), status=order.status)
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its status history prefetched.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Order.objects.prefetch_related("status_history").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders, newest first.

        Supported filter keys:
        - ``status``
        - ``created_at__range``
        """
        queryset = Order.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def history(self, order_id: str) -> List[OrderStatusHistory]:
        return list(
            OrderStatusHistory.objects.filter(order_id=order_id).order_by("created_at", "id")
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order."""
        entity.save()
        logger.info("order.saved", order_id=str(entity.id))
        return entity

    def update_status(
        self, order: Order, status: str, paid_at: Optional[datetime] = None
    ) -> Order:
        order.status = status
        update_fields = ["status"]
        if paid_at is not None:
            order.paid_at = paid_at
            update_fields.append("paid_at")
        order.save(update_fields=update_fields)
        return order

    def add_history(
        self,
        order_id: UUID,
        to_status: str,
        from_status: Optional[str] = None,
        notes: str = "",
        changed_by: str = "",
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
        history = OrderStatusHistory(
            order_id=order_id,
            from_status=from_status,
            to_status=to_status,
            notes=notes,
            changed_by=changed_by,
        )
        history.save()

        logger.info(
            "order.history_added",
            order_id=str(order_id),
            from_status=from_status,
            to_status=to_status,
        )
        return history

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def ids_with_status(self, slug: str) -> List[UUID]:
        return list(
            Order.objects.filter(status=slug).order_by("id").values_list("id", flat=True)
        )

    def reassign(
        self, order_ids: Iterable[UUID], to_status: str, stamp_paid: bool = False
    ) -> int:
        ids = list(order_ids)
        now = timezone.now()
        updated = Order.objects.filter(id__in=ids).update(status=to_status, updated_at=now)
        if stamp_paid:
            Order.objects.filter(id__in=ids, paid_at__isnull=True).update(paid_at=now)
        return updated

    def add_history_bulk(self, entries: Iterable[Dict[str, Any]]) -> int:
        rows = OrderStatusHistory.objects.bulk_create(
            [OrderStatusHistory(**entry) for entry in entries]
        )
        return len(rows)
