"""Django ORM implementation of the analytics read model.

Queries are bounded by the ``(status, created_at)`` index on orders and the
``(order, created_at)`` / ``created_at`` indexes on the history table.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List

from django.db.models import Count

from modules.analytics.engine import HistoryEntry
from modules.analytics.repositories.interfaces import IAnalyticsRepository
from modules.orders.models import Order, OrderStatusHistory
from modules.statuses.models import Status


class AnalyticsDjangoRepository(IAnalyticsRepository):
    def order_counts_by_status(self, start: datetime, end: datetime) -> Dict[str, int]:
        rows = (
            Order.objects.filter(created_at__range=(start, end))
            .values("status")
            .annotate(total=Count("id"))
            .order_by()
        )
        return {row["status"]: row["total"] for row in rows}

    def order_creation_times(self, start: datetime, end: datetime) -> List[datetime]:
        return list(
            Order.objects.filter(created_at__range=(start, end))
            .order_by()
            .values_list("created_at", flat=True)
        )

    def history_for_window(self, start: datetime, end: datetime) -> List[HistoryEntry]:
        """Full history of every order whose history intersects ``[start, end]``.

        An order either wrote a row inside the window or, having a row before
        ``start``, was still sitting in its latest status when the window
        opened.  Both cases reduce to "has a row at or before ``end``".
        """
        order_ids = (
            OrderStatusHistory.objects.filter(created_at__lte=end)
            .values("order_id")
            .distinct()
        )
        rows = (
            OrderStatusHistory.objects.filter(order_id__in=order_ids)
            .order_by("order_id", "created_at", "id")
            .values_list("order_id", "from_status", "to_status", "created_at")
        )
        return [HistoryEntry(*row) for row in rows]

    def status_names(self) -> Dict[str, str]:
        return dict(Status.objects.values_list("slug", "name"))
