"""Order status service layer (Use Cases).

Moves orders between registry statuses.  Every status change is one
unit of work: the denormalised ``Order.status``, ``paid_at`` and the
history row are written in the same ``transaction.atomic`` block, and the
``StatusEntered`` event is only published once that block commits.

Business rules enforced:
- The target status must exist and be active.
- When the transition graph is enforced, the move must follow an edge
  (``requires_admin`` edges need an admin actor).
- Every status change, including creation, appends one history row.
- ``paid_at`` is stamped the first time an order enters a paid status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from modules.orders.dtos import StatusHistoryDTO
from modules.orders.events import StatusEntered
from modules.orders.exceptions import InvalidTransition, OrderNotFound, StatusRejected
from modules.statuses.graph import TransitionGraph, TransitionPolicy
from shared.infrastructure.bus import publish_on_commit

if TYPE_CHECKING:
    from modules.orders.dtos import ChangeStatusDTO, CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.statuses.models import Status
    from modules.statuses.repositories.interfaces import IStatusRepository

logger = structlog.get_logger(__name__)


class OrderStatusService:
    """Application service for order status changes.

    Receives repositories and the transition policy via constructor
    injection (DIP).  ``lock_rows`` defaults to
    ``STATUS_WORKFLOW["LOCK_ORDER_ROWS"]``.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        status_repository: IStatusRepository,
        policy: Optional[TransitionPolicy] = None,
        lock_rows: Optional[bool] = None,
    ) -> None:
        self._order_repo = order_repository
        self._status_repo = status_repository
        self._policy = policy or TransitionPolicy.from_settings()
        if lock_rows is None:
            lock_rows = settings.STATUS_WORKFLOW["LOCK_ORDER_ROWS"]
        self._lock_rows = lock_rows

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def change_status(
        self,
        order_id: str,
        to_slug: str,
        notes: str = "",
        changed_by: str = "Admin",
        actor_is_admin: bool = True,
    ) -> Order:
        """Move an order onto *to_slug*.

        Steps:
        1. Load the order (row-locked when ``lock_rows`` is on).
        2. Resolve the target; it must exist and be active.
        3. Ask the transition policy whether the move is allowed.
        4. Write status, ``paid_at`` and the history row.
        5. Publish ``StatusEntered`` after commit.

        Raises:
            OrderNotFound: order does not exist.
            StatusRejected: target status missing or inactive.
            InvalidTransition: the policy refuses the move.
        """
        to_slug = to_slug.strip().upper()
        order = self._load(str(order_id))

        log = logger.bind(
            order_id=str(order.id),
            from_status=order.status,
            to_status=to_slug,
            changed_by=changed_by,
        )

        target = self._resolve_target(to_slug)

        graph = (
            self._load_graph()
            if self._policy.enforce_transition_graph
            else TransitionGraph()
        )
        decision = self._policy.evaluate(graph, order.status, to_slug, actor_is_admin)
        if not decision.allowed:
            log.warning("order.invalid_transition", reason=decision.reason)
            raise InvalidTransition(decision.reason)

        from_slug = order.status
        self._order_repo.update_status(order, target.slug, paid_at=self._paid_at(order, target))
        self._order_repo.add_history(
            order_id=order.id,
            from_status=from_slug,
            to_status=target.slug,
            notes=notes,
            changed_by=changed_by,
        )

        log.info("order.status_changed")
        publish_on_commit(
            StatusEntered(aggregate_id=order.id, status_slug=target.slug, notes=notes)
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create an order on its initial status with the creation history row.

        Raises:
            StatusRejected: the initial status is missing or inactive.
        """
        slug = dto.status or settings.STATUS_WORKFLOW["INITIAL_STATUS"]
        status = self._resolve_target(slug)

        order = self._order_repo.create(
            {
                "customer_name": dto.customer_name,
                "customer_email": dto.customer_email,
                "total_amount": dto.total_amount,
                "tracking_number": dto.tracking_number,
                "status": status.slug,
                "paid_at": timezone.now() if status.is_paid else None,
            }
        )
        self._order_repo.add_history(
            order_id=order.id,
            from_status=None,
            to_status=status.slug,
            notes=dto.notes or "Order created",
            changed_by=dto.changed_by,
        )

        logger.info("order.registered", order_id=str(order.id), status=status.slug)
        publish_on_commit(
            StatusEntered(aggregate_id=order.id, status_slug=status.slug, notes=dto.notes)
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    def apply(self, order_id: str, dto: ChangeStatusDTO) -> Order:
        """``change_status`` driven by a DTO (API entry point)."""
        return self.change_status(
            order_id,
            dto.status,
            notes=dto.notes,
            changed_by=dto.changed_by,
            actor_is_admin=dto.actor_is_admin,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    def get_history(self, order_id: str) -> List[StatusHistoryDTO]:
        """Chronological status history of an order.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self.get_order(order_id)
        return [
            StatusHistoryDTO.from_entity(row)
            for row in self._order_repo.history(str(order.id))
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self, order_id: str) -> Order:
        if self._lock_rows:
            order = self._order_repo.get_for_update(order_id)
        else:
            order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _resolve_target(self, slug: str) -> Status:
        status = self._status_repo.get_by_slug(slug)
        if status is None:
            raise StatusRejected(f"Status {slug} does not exist.")
        if not status.is_active:
            raise StatusRejected(f"Status {slug} is inactive.")
        return status

    def _load_graph(self) -> TransitionGraph:
        return TransitionGraph.from_transitions(self._status_repo.all_transitions())

    @staticmethod
    def _paid_at(order: Order, status: Status):
        if status.is_paid and order.paid_at is None:
            return timezone.now()
        return None
