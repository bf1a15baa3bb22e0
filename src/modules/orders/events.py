"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class StatusEntered(DomainEvent):
    """Raised after an order has been committed on a new status.

    ``aggregate_id`` is the order id.  Consumers (e-mail notifications)
    run outside the transaction that produced the event.
    """

    status_slug: str = ""
    notes: str = field(default="", compare=False)
