"""Order repository interface.

Extends ``IRepository[Order]`` with the methods the status workflow needs:
locked look-ups, the append-only history trail and the bulk writes used
when a status is retired.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for orders and their status history."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order row (``status`` included)."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with prefetched status history."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order holding a row-level lock."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters."""

    @abstractmethod
    def update_status(
        self, order: Order, status: str, paid_at: Optional[datetime] = None
    ) -> Order:
        """Write the denormalised status (and ``paid_at`` when given)."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        to_status: str,
        from_status: Optional[str] = None,
        notes: str = "",
        changed_by: str = "",
    ) -> OrderStatusHistory:
        """Append a status change to the order's audit trail."""

    @abstractmethod
    def history(self, order_id: str) -> List[OrderStatusHistory]:
        """Chronological status history of an order."""

    # ------------------------------------------------------------------
    # Bulk operations (status retirement)
    # ------------------------------------------------------------------

    @abstractmethod
    def ids_with_status(self, slug: str) -> List[UUID]:
        """Ids of the orders currently on *slug*."""

    @abstractmethod
    def reassign(
        self, order_ids: Iterable[UUID], to_status: str, stamp_paid: bool = False
    ) -> int:
        """Move the given orders onto *to_status* in one statement."""

    @abstractmethod
    def add_history_bulk(self, entries: Iterable[Dict[str, Any]]) -> int:
        """Append many history rows at once; returns the number written."""
