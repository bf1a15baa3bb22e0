"""Django ORM implementation of the Status repository.

Satisfies ``IStatusRepository`` using Django's QuerySet API.  Look-ups
follow the Null Object pattern: missing rows come back as ``None`` and the
Service Layer decides which domain error that means.

Multi-row writes are not wrapped here: the services own the transaction
boundary so that edge cleanup, order reassignment and status deletion
commit or roll back together.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Q

from modules.notifications.models import EmailTemplate
from modules.orders.models import Order
from modules.statuses.models import Status, StatusTransition
from modules.statuses.repositories.interfaces import IStatusRepository

logger = structlog.get_logger(__name__)


class StatusDjangoRepository(IStatusRepository):
    """Concrete Status repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Status]:
        """Retrieve a status with its e-mail template.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Status.objects.select_related("email_template").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_slug(self, slug: str) -> Optional[Status]:
        return (
            Status.objects.select_related("email_template")
            .filter(slug=slug.strip().upper())
            .first()
        )

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Status]:
        """List statuses ordered by ``sort_order``.

        Examples of valid filters::

            {"is_active": True}
            {"is_core": False}
        """
        queryset = Status.objects.select_related("email_template")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def email_template_exists(self, template_id: str) -> bool:
        try:
            return EmailTemplate.objects.filter(id=template_id).exists()
        except (ValueError, ValidationError):
            return False

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Status) -> Status:
        """Persist (create or update) a status."""
        entity.save()
        logger.info("status.saved", status_id=str(entity.id), slug=entity.slug)
        return entity

    def delete(self, status: Status) -> None:
        Status.objects.filter(pk=status.pk).delete()
        logger.info("status.row_deleted", status_id=str(status.id), slug=status.slug)

    # ------------------------------------------------------------------
    # Usage
    # ------------------------------------------------------------------

    def count_orders(self, slug: str) -> int:
        return Order.objects.filter(status=slug).count()

    def order_counts(self) -> Dict[str, int]:
        rows = Order.objects.values("status").annotate(total=Count("id"))
        return {row["status"]: row["total"] for row in rows}

    # ------------------------------------------------------------------
    # Transition edges
    # ------------------------------------------------------------------

    def _edges(self):
        return StatusTransition.objects.select_related("from_status", "to_status")

    def all_transitions(self) -> List[StatusTransition]:
        return list(self._edges())

    def inbound_transitions(self, status_id: str) -> List[StatusTransition]:
        return list(
            self._edges().filter(to_status_id=status_id).order_by("from_status__sort_order")
        )

    def outbound_transitions(self, status_id: str) -> List[StatusTransition]:
        return list(
            self._edges().filter(from_status_id=status_id).order_by("to_status__sort_order")
        )

    def get_transition(self, transition_id: str) -> Optional[StatusTransition]:
        try:
            return self._edges().filter(id=transition_id).first()
        except (ValueError, ValidationError):
            return None

    def transition_exists(self, from_status_id: str, to_status_id: str) -> bool:
        return StatusTransition.objects.filter(
            from_status_id=from_status_id, to_status_id=to_status_id
        ).exists()

    def add_transition(
        self, from_status_id: str, to_status_id: str, requires_admin: bool = False
    ) -> StatusTransition:
        edge = StatusTransition.objects.create(
            from_status_id=from_status_id,
            to_status_id=to_status_id,
            requires_admin=requires_admin,
        )
        logger.info(
            "status.transition_added",
            transition_id=str(edge.id),
            from_status_id=str(from_status_id),
            to_status_id=str(to_status_id),
        )
        return self._edges().get(pk=edge.pk)

    def delete_transition(self, transition: StatusTransition) -> None:
        StatusTransition.objects.filter(pk=transition.pk).delete()
        logger.info("status.transition_removed", transition_id=str(transition.id))

    def delete_transitions_for(self, status_id: str) -> int:
        deleted, _ = StatusTransition.objects.filter(
            Q(from_status_id=status_id) | Q(to_status_id=status_id)
        ).delete()
        return deleted
