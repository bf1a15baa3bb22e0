"""Status repository interface.

Extends ``IRepository[Status]`` with the look-ups the registry, the
transition graph and the deletion protocol need: slug resolution, edge
management and usage counts.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.statuses.models import Status, StatusTransition


class IStatusRepository(IRepository["Status"]):
    """Repository contract for statuses and their transition edges."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional[Status]:
        """Retrieve a status by slug."""

    @abstractmethod
    def delete(self, status: Status) -> None:
        """Physically remove a status row (edges must already be gone)."""

    @abstractmethod
    def email_template_exists(self, template_id: str) -> bool:
        """Check whether an e-mail template id can be bound to a status."""

    # ------------------------------------------------------------------
    # Usage
    # ------------------------------------------------------------------

    @abstractmethod
    def count_orders(self, slug: str) -> int:
        """Number of orders currently on the status."""

    @abstractmethod
    def order_counts(self) -> Dict[str, int]:
        """Orders per status slug, for every slug with at least one order."""

    # ------------------------------------------------------------------
    # Transition edges
    # ------------------------------------------------------------------

    @abstractmethod
    def all_transitions(self) -> List[StatusTransition]:
        """Every registered edge (with both endpoints loaded)."""

    @abstractmethod
    def inbound_transitions(self, status_id: str) -> List[StatusTransition]:
        """Edges ending at the status."""

    @abstractmethod
    def outbound_transitions(self, status_id: str) -> List[StatusTransition]:
        """Edges starting at the status."""

    @abstractmethod
    def get_transition(self, transition_id: str) -> Optional[StatusTransition]:
        """Retrieve an edge by id."""

    @abstractmethod
    def transition_exists(self, from_status_id: str, to_status_id: str) -> bool:
        """Check whether the directed edge is already registered."""

    @abstractmethod
    def add_transition(
        self, from_status_id: str, to_status_id: str, requires_admin: bool = False
    ) -> StatusTransition:
        """Register a directed edge."""

    @abstractmethod
    def delete_transition(self, transition: StatusTransition) -> None:
        """Remove a single edge."""

    @abstractmethod
    def delete_transitions_for(self, status_id: str) -> int:
        """Remove every edge touching the status, in either direction."""
