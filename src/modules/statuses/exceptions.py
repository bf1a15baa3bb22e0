"""Status registry domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses; ``code`` is the machine-readable kind.
"""

from __future__ import annotations

from typing import Iterable

from modules.core.exceptions import DomainError


class StatusNotFound(DomainError):
    """The requested status does not exist."""

    code = "not_found"


class StatusAlreadyExists(DomainError):
    """A status with the same slug already exists."""

    code = "validation_error"


class EmailTemplateNotFound(DomainError):
    """The e-mail template referenced by a status payload does not exist."""

    code = "validation_error"


class ForbiddenFieldEdit(DomainError):
    """The payload touches fields that may not be edited on this status."""

    code = "forbidden_field_edit"

    def __init__(self, message: str, fields: Iterable[str]) -> None:
        super().__init__(message, fields=sorted(fields))

    @property
    def fields(self) -> list[str]:
        return self.details["fields"]


class CoreStatusProtected(DomainError):
    """Core statuses can never be deleted."""

    code = "rejected"


class ConflictRequiresReassignment(DomainError):
    """The status still has orders and no reassignment target was given."""

    code = "conflict_requires_reassignment"

    def __init__(self, message: str, order_count: int) -> None:
        super().__init__(message, order_count=order_count)

    @property
    def order_count(self) -> int:
        return self.details["order_count"]


class ReassignTargetNotFound(DomainError):
    """The reassignment target slug does not resolve to a usable status."""

    code = "reassign_target_not_found"


class TransitionNotFound(DomainError):
    """The requested transition edge does not exist."""

    code = "not_found"


class TransitionAlreadyExists(DomainError):
    """An edge between the two statuses is already registered."""

    code = "validation_error"


class InvalidTransitionEdge(DomainError):
    """The edge definition itself is invalid (e.g. a self-loop)."""

    code = "validation_error"
