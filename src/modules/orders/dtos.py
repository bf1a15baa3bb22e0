"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderDTO``: input for order creation.
- ``ChangeStatusDTO``: input for a status change.
- ``StatusHistoryDTO``: output for a status history record.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.orders.constants import DEFAULT_ACTOR

if TYPE_CHECKING:
    from modules.orders.models import OrderStatusHistory


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    ``status`` defaults to ``STATUS_WORKFLOW["INITIAL_STATUS"]`` when omitted.
    """

    model_config = ConfigDict(frozen=True)

    customer_name: str = ""
    customer_email: str = ""
    total_amount: Decimal = Decimal("0.00")
    tracking_number: str = ""
    status: Optional[str] = None
    notes: str = ""
    changed_by: str = DEFAULT_ACTOR

    @field_validator("total_amount")
    @classmethod
    def total_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Total amount cannot be negative.")
        return v

    @field_validator("status")
    @classmethod
    def normalise_status(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else None


class ChangeStatusDTO(BaseModel):
    """Immutable DTO for a status change request."""

    model_config = ConfigDict(frozen=True)

    status: str
    notes: str = ""
    changed_by: str = DEFAULT_ACTOR
    actor_is_admin: bool = True

    @field_validator("status")
    @classmethod
    def status_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Status must not be empty.")
        return v.strip().upper()


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class StatusHistoryDTO(BaseModel):
    """Immutable DTO for order status history API responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    from_status: Optional[str]
    to_status: str
    notes: str
    changed_by: str
    created_at: datetime

    @classmethod
    def from_entity(cls, history: OrderStatusHistory) -> StatusHistoryDTO:
        return cls(
            id=history.id,
            from_status=history.from_status,
            to_status=history.to_status,
            notes=history.notes,
            changed_by=history.changed_by,
            created_at=history.created_at,
        )
