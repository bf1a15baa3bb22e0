"""Status registry DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateStatusDTO``: input for status creation.
- ``UpdateStatusDTO``: input for partial updates; the set of *touched*
  fields (not just non-null ones) drives the core-status whitelist check.
- ``CreateTransitionDTO``: input for a new transition edge.
- ``StatusDetailDTO``: status enriched with template, edges and usage.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.statuses.constants import SLUG_PATTERN

if TYPE_CHECKING:
    from modules.statuses.models import Status, StatusTransition


def normalize_slug(value: str) -> str:
    """``" awaiting-proof "`` -> ``"AWAITING_PROOF"``."""
    return "_".join(value.strip().upper().replace("-", " ").split())


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateStatusDTO(BaseModel):
    """Immutable DTO for status creation requests.

    Validates:
    - ``slug`` normalised to upper snake case, 2-50 chars, starting with a letter.
    - ``name`` is a non-empty string.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    slug: str
    name: str
    description: str = ""
    icon: str = ""
    color: str = ""
    badge_color: str = ""
    is_paid: bool = False
    include_in_reports: bool = True
    allow_downloads: bool = False
    sort_order: int = 0
    is_active: bool = True
    email_template_id: Optional[UUID] = None
    send_email_on_enter: bool = False

    @field_validator("slug")
    @classmethod
    def slug_must_be_valid(cls, v: str) -> str:
        slug = normalize_slug(v)
        if not SLUG_PATTERN.match(slug):
            raise ValueError(
                "Slug must be 2-50 characters: letters, digits and underscores, "
                "starting with a letter."
            )
        return slug

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()


class UpdateStatusDTO(BaseModel):
    """Immutable DTO for partial status updates.

    Every field is optional.  ``slug`` and ``is_core`` are accepted only so
    the service can reject them explicitly instead of ignoring them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    slug: Optional[str] = None
    is_core: Optional[bool] = None
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    badge_color: Optional[str] = None
    is_paid: Optional[bool] = None
    include_in_reports: Optional[bool] = None
    allow_downloads: Optional[bool] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None
    email_template_id: Optional[UUID] = None
    send_email_on_enter: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip() if v is not None else v

    @property
    def touched_fields(self) -> set[str]:
        """Fields present in the payload, including explicit nulls."""
        return set(self.model_fields_set)

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class CreateTransitionDTO(BaseModel):
    """Immutable DTO for a new transition edge out of a status."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    to_status_id: UUID
    requires_admin: bool = False


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class EmailTemplateSummaryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    subject: str


class TransitionDTO(BaseModel):
    """Immutable DTO for a transition edge."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    from_status: str
    to_status: str
    requires_admin: bool

    @classmethod
    def from_entity(cls, edge: StatusTransition) -> TransitionDTO:
        return cls(
            id=edge.id,
            from_status=edge.from_status.slug,
            to_status=edge.to_status.slug,
            requires_admin=edge.requires_admin,
        )


class StatusDetailDTO(BaseModel):
    """Immutable DTO for the status detail API response."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    slug: str
    name: str
    description: str
    icon: str
    color: str
    badge_color: str
    is_core: bool
    is_paid: bool
    include_in_reports: bool
    allow_downloads: bool
    sort_order: int
    is_active: bool
    send_email_on_enter: bool
    email_template: Optional[EmailTemplateSummaryDTO]
    inbound_transitions: List[TransitionDTO]
    outbound_transitions: List[TransitionDTO]
    is_terminal: bool
    order_count: int
    can_delete: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(
        cls,
        status: Status,
        inbound: List[StatusTransition],
        outbound: List[StatusTransition],
        order_count: int,
    ) -> StatusDetailDTO:
        template = status.email_template
        return cls(
            id=status.id,
            slug=status.slug,
            name=status.name,
            description=status.description,
            icon=status.icon,
            color=status.color,
            badge_color=status.badge_color,
            is_core=status.is_core,
            is_paid=status.is_paid,
            include_in_reports=status.include_in_reports,
            allow_downloads=status.allow_downloads,
            sort_order=status.sort_order,
            is_active=status.is_active,
            send_email_on_enter=status.send_email_on_enter,
            email_template=(
                EmailTemplateSummaryDTO(
                    id=template.id, name=template.name, subject=template.subject
                )
                if template
                else None
            ),
            inbound_transitions=[TransitionDTO.from_entity(e) for e in inbound],
            outbound_transitions=[TransitionDTO.from_entity(e) for e in outbound],
            is_terminal=not outbound,
            order_count=order_count,
            can_delete=not status.is_core and order_count == 0,
            created_at=status.created_at,
            updated_at=status.updated_at,
        )
