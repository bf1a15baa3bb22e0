"""Status retirement: delete a status and migrate its orders.

``StatusDeletionService.delete_status`` is one explicit transaction script.
Each step runs inside a single ``transaction.atomic`` block, in order:

1. capture the ids of the orders currently on the status;
2. move those orders onto the reassignment target;
3. append one history row per moved order (``changed_by = "System"``);
4. delete every edge touching the status, in either direction;
5. delete the status row.

Any failure rolls the whole script back.  ``StatusEntered`` events for the
moved orders are published only after commit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction

from modules.orders.events import StatusEntered
from modules.statuses.constants import SYSTEM_ACTOR
from modules.statuses.exceptions import (
    ConflictRequiresReassignment,
    CoreStatusProtected,
    ReassignTargetNotFound,
    StatusNotFound,
)
from shared.infrastructure.bus import publish_on_commit

if TYPE_CHECKING:
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.statuses.repositories.interfaces import IStatusRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DeletionResult:
    deleted_slug: str
    reassigned_to: Optional[str]
    reassigned_count: int
    removed_transitions: int


class StatusDeletionService:
    """Deletes non-core statuses, reassigning their orders when needed."""

    def __init__(
        self,
        status_repository: IStatusRepository,
        order_repository: IOrderRepository,
    ) -> None:
        self._status_repo = status_repository
        self._order_repo = order_repository

    @transaction.atomic
    def delete_status(
        self, status_id: str, reassign_to: Optional[str] = None
    ) -> DeletionResult:
        """Delete a status, moving its orders onto *reassign_to*.

        Raises:
            StatusNotFound: the status does not exist.
            CoreStatusProtected: the status is core.
            ConflictRequiresReassignment: orders use it and no target given.
            ReassignTargetNotFound: the target is unknown or the status itself.
        """
        status = self._status_repo.get_by_id(status_id)
        if status is None:
            raise StatusNotFound(f"Status {status_id} not found.")

        log = logger.bind(status_id=str(status.id), slug=status.slug)

        if status.is_core:
            log.warning("status.delete_rejected", reason="core")
            raise CoreStatusProtected(f"Core status {status.slug} cannot be deleted.")

        order_count = self._status_repo.count_orders(status.slug)
        target = None
        if reassign_to:
            target = self._status_repo.get_by_slug(reassign_to)
            if target is None or target.pk == status.pk:
                raise ReassignTargetNotFound(
                    f"Reassignment target {reassign_to.strip().upper()} not found."
                )
        elif order_count > 0:
            log.warning("status.delete_rejected", reason="in_use", order_count=order_count)
            raise ConflictRequiresReassignment(
                f"Status {status.slug} is used by {order_count} order(s); "
                "provide a status to reassign them to.",
                order_count=order_count,
            )

        # 1. Capture affected orders
        order_ids = self._order_repo.ids_with_status(status.slug)

        reassigned = 0
        if order_ids and target is not None:
            # 2. Move the orders
            reassigned = self._order_repo.reassign(
                order_ids, target.slug, stamp_paid=target.is_paid
            )

            # 3. Audit trail
            notes = f'Status "{status.name}" was deleted; reassigned to {target.slug}'
            self._order_repo.add_history_bulk(
                {
                    "order_id": order_id,
                    "from_status": status.slug,
                    "to_status": target.slug,
                    "notes": notes,
                    "changed_by": SYSTEM_ACTOR,
                }
                for order_id in order_ids
            )

        # 4. Edges, both directions
        removed_transitions = self._status_repo.delete_transitions_for(str(status.id))

        # 5. The status itself
        self._status_repo.delete(status)

        if target is not None:
            for order_id in order_ids:
                publish_on_commit(
                    StatusEntered(aggregate_id=order_id, status_slug=target.slug)
                )

        log.info(
            "status.deleted",
            reassigned_to=target.slug if target else None,
            reassigned_count=reassigned,
            removed_transitions=removed_transitions,
        )
        return DeletionResult(
            deleted_slug=status.slug,
            reassigned_to=target.slug if target else None,
            reassigned_count=reassigned,
            removed_transitions=removed_transitions,
        )
