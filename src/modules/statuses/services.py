"""Status registry service layer (Use Cases).

Orchestrates status CRUD and transition-edge management.  All write
operations are atomic; the service defines the unit-of-work boundary.

Business rules enforced:
- Slugs are normalised, validated and unique; they never change.
- API-created statuses are never core.
- Core statuses only accept edits to ``CORE_EDITABLE_FIELDS``.
- Transition edges are unique per pair and never self-loops.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.statuses.constants import CORE_EDITABLE_FIELDS
from modules.statuses.dtos import StatusDetailDTO
from modules.statuses.exceptions import (
    EmailTemplateNotFound,
    ForbiddenFieldEdit,
    InvalidTransitionEdge,
    StatusAlreadyExists,
    StatusNotFound,
    TransitionAlreadyExists,
    TransitionNotFound,
)
from modules.statuses.graph import TransitionGraph
from modules.statuses.models import Status

if TYPE_CHECKING:
    from modules.statuses.dtos import (
        CreateStatusDTO,
        CreateTransitionDTO,
        UpdateStatusDTO,
    )
    from modules.statuses.models import StatusTransition
    from modules.statuses.repositories.interfaces import IStatusRepository

logger = structlog.get_logger(__name__)

# Columns that cannot hold NULL; an explicit null in a patch leaves them as is.
_NON_NULLABLE = frozenset(
    {
        "name",
        "description",
        "icon",
        "color",
        "badge_color",
        "is_paid",
        "include_in_reports",
        "allow_downloads",
        "sort_order",
        "is_active",
        "send_email_on_enter",
    }
)


class StatusService:
    """Application service for the status registry.

    Receives the repository via constructor injection (DIP).
    """

    def __init__(self, status_repository: IStatusRepository) -> None:
        self._status_repo = status_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_status(self, dto: CreateStatusDTO) -> Status:
        """Register a new (non-core) status.

        Raises:
            StatusAlreadyExists: the normalised slug is taken.
            EmailTemplateNotFound: ``email_template_id`` does not resolve.
        """
        log = logger.bind(slug=dto.slug)

        if self._status_repo.get_by_slug(dto.slug) is not None:
            log.warning("status.duplicate_slug")
            raise StatusAlreadyExists(f"Status {dto.slug} already exists.")

        if dto.email_template_id is not None:
            self._ensure_template(str(dto.email_template_id))

        status = Status(is_core=False, **dto.model_dump())
        self._status_repo.save(status)
        log.info("status.registered", status_id=str(status.id))
        return status

    @transaction.atomic
    def update_status(self, status_id: str, dto: UpdateStatusDTO) -> Status:
        """Apply a partial update.

        The *touched* fields decide what is allowed: ``slug`` and
        ``is_core`` are never editable, and a core status only accepts
        ``CORE_EDITABLE_FIELDS``.  An explicit ``null`` on a non-nullable
        column is ignored; ``email_template_id: null`` unbinds the template.

        Raises:
            StatusNotFound: the status does not exist.
            ForbiddenFieldEdit: the payload touches protected fields.
            EmailTemplateNotFound: ``email_template_id`` does not resolve.
        """
        status = self._get(status_id)
        touched = dto.touched_fields
        log = logger.bind(status_id=str(status.id), slug=status.slug)

        immutable = touched & {"slug", "is_core"}
        if immutable:
            log.warning("status.forbidden_edit", fields=sorted(immutable))
            raise ForbiddenFieldEdit(
                "Slug and core flag cannot be changed.", immutable
            )

        if status.is_core:
            outside = touched - CORE_EDITABLE_FIELDS
            if outside:
                log.warning("status.forbidden_edit", fields=sorted(outside))
                raise ForbiddenFieldEdit(
                    f"Core status {status.slug} only allows editing "
                    f"{', '.join(sorted(CORE_EDITABLE_FIELDS))}.",
                    outside,
                )

        changes: Dict[str, Any] = dto.changes()
        template_id = changes.get("email_template_id")
        if template_id is not None:
            self._ensure_template(str(template_id))

        for field_name, value in changes.items():
            if value is None and field_name in _NON_NULLABLE:
                continue
            setattr(status, field_name, value)

        self._status_repo.save(status)
        log.info("status.updated", fields=sorted(changes))
        return self._status_repo.get_by_id(str(status.id)) or status

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_status(self, status_id: str) -> StatusDetailDTO:
        """Status with its template summary, edges and usage.

        Raises:
            StatusNotFound: if the status does not exist.
        """
        status = self._get(status_id)
        return StatusDetailDTO.from_entity(
            status,
            inbound=self._status_repo.inbound_transitions(str(status.id)),
            outbound=self._status_repo.outbound_transitions(str(status.id)),
            order_count=self._status_repo.count_orders(status.slug),
        )

    def list_statuses(self, filters: Optional[Dict[str, Any]] = None) -> List[Status]:
        """Return statuses ordered by ``sort_order, name``."""
        return self._status_repo.list(filters)

    def order_counts(self) -> Dict[str, int]:
        return self._status_repo.order_counts()

    def load_graph(self) -> TransitionGraph:
        """Snapshot of every registered edge."""
        return TransitionGraph.from_transitions(self._status_repo.all_transitions())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get(self, status_id: str) -> Status:
        status = self._status_repo.get_by_id(status_id)
        if status is None:
            raise StatusNotFound(f"Status {status_id} not found.")
        return status

    def _ensure_template(self, template_id: str) -> None:
        if not self._status_repo.email_template_exists(template_id):
            raise EmailTemplateNotFound(f"Email template {template_id} not found.")


class TransitionService:
    """Application service for transition-edge management."""

    def __init__(self, status_repository: IStatusRepository) -> None:
        self._status_repo = status_repository

    @transaction.atomic
    def add_transition(
        self, from_status_id: str, dto: CreateTransitionDTO
    ) -> StatusTransition:
        """Register the edge ``from_status -> dto.to_status_id``.

        Raises:
            StatusNotFound: either endpoint does not exist.
            InvalidTransitionEdge: the edge would loop onto the same status.
            TransitionAlreadyExists: the edge is already registered.
        """
        source = self._status_repo.get_by_id(from_status_id)
        if source is None:
            raise StatusNotFound(f"Status {from_status_id} not found.")
        target = self._status_repo.get_by_id(str(dto.to_status_id))
        if target is None:
            raise StatusNotFound(f"Status {dto.to_status_id} not found.")

        if source.pk == target.pk:
            raise InvalidTransitionEdge("A status cannot transition to itself.")
        if self._status_repo.transition_exists(str(source.id), str(target.id)):
            raise TransitionAlreadyExists(
                f"Transition {source.slug} -> {target.slug} already exists."
            )

        return self._status_repo.add_transition(
            str(source.id), str(target.id), requires_admin=dto.requires_admin
        )

    @transaction.atomic
    def remove_transition(self, transition_id: str) -> StatusTransition:
        """Remove an edge and return it.

        Raises:
            TransitionNotFound: the edge does not exist.
        """
        edge = self._status_repo.get_transition(transition_id)
        if edge is None:
            raise TransitionNotFound(f"Transition {transition_id} not found.")
        self._status_repo.delete_transition(edge)
        return edge

    def list_transitions(self, status_id: str) -> Dict[str, List[StatusTransition]]:
        """Inbound and outbound edges of a status.

        Raises:
            StatusNotFound: the status does not exist.
        """
        status = self._status_repo.get_by_id(status_id)
        if status is None:
            raise StatusNotFound(f"Status {status_id} not found.")
        return {
            "inbound": self._status_repo.inbound_transitions(str(status.id)),
            "outbound": self._status_repo.outbound_transitions(str(status.id)),
        }
