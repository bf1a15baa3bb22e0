"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import DomainError


class OrderNotFound(DomainError):
    """The requested order does not exist."""

    code = "not_found"


class StatusRejected(DomainError):
    """The target status does not exist or is inactive."""

    code = "rejected"


class InvalidTransition(DomainError):
    """The move is not allowed by the transition policy."""

    code = "invalid_transition"
