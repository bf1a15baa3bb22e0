"""Transition graph and transition policy.

The set of states is whatever the registry currently holds; edges are
optional.  ``TransitionPolicy`` decides how the graph is used:

- permissive (default): any move to another active status is allowed and
  the edges are informational only;
- strict (``enforce_transition_graph=True``): a move must follow a
  registered edge, so a status without outbound edges is terminal.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from django.conf import settings

if TYPE_CHECKING:
    from modules.statuses.models import StatusTransition


@dataclass(frozen=True)
class Edge:
    from_slug: str
    to_slug: str
    requires_admin: bool = False


class TransitionGraph:
    """Immutable snapshot of the registered transition edges, keyed by slug."""

    def __init__(self, edges: Iterable[Edge] = ()) -> None:
        self._outbound: Dict[str, Dict[str, Edge]] = defaultdict(dict)
        self._inbound: Dict[str, Dict[str, Edge]] = defaultdict(dict)
        for edge in edges:
            self._outbound[edge.from_slug][edge.to_slug] = edge
            self._inbound[edge.to_slug][edge.from_slug] = edge

    @classmethod
    def from_transitions(cls, transitions: Iterable[StatusTransition]) -> TransitionGraph:
        return cls(
            Edge(t.from_status.slug, t.to_status.slug, t.requires_admin)
            for t in transitions
        )

    def outbound(self, slug: str) -> List[str]:
        return sorted(self._outbound.get(slug, {}))

    def inbound(self, slug: str) -> List[str]:
        return sorted(self._inbound.get(slug, {}))

    def edge(self, from_slug: str, to_slug: str) -> Optional[Edge]:
        return self._outbound.get(from_slug, {}).get(to_slug)

    def has_edge(self, from_slug: str, to_slug: str) -> bool:
        return self.edge(from_slug, to_slug) is not None

    def is_terminal(self, slug: str) -> bool:
        return not self._outbound.get(slug)

    def __len__(self) -> int:
        return sum(len(targets) for targets in self._outbound.values())


@dataclass(frozen=True)
class TransitionDecision:
    allowed: bool
    reason: str = ""


@dataclass(frozen=True)
class TransitionPolicy:
    enforce_transition_graph: bool = False

    @classmethod
    def from_settings(cls) -> TransitionPolicy:
        return cls(
            enforce_transition_graph=settings.STATUS_WORKFLOW["ENFORCE_TRANSITION_GRAPH"]
        )

    def evaluate(
        self,
        graph: TransitionGraph,
        current: str,
        target: str,
        actor_is_admin: bool = True,
    ) -> TransitionDecision:
        """Decide whether an order on *current* may move to *target*.

        Target existence and activeness are checked by the caller; this only
        looks at the shape of the move.
        """
        if current == target:
            return TransitionDecision(False, f"Order is already in status {target}.")
        if not self.enforce_transition_graph:
            return TransitionDecision(True)

        edge = graph.edge(current, target)
        if edge is None:
            if graph.is_terminal(current):
                return TransitionDecision(
                    False, f"Status {current} is terminal; no transitions allowed."
                )
            return TransitionDecision(
                False, f"Cannot transition from {current} to {target}."
            )
        if edge.requires_admin and not actor_is_admin:
            return TransitionDecision(
                False, f"Transition from {current} to {target} requires an admin."
            )
        return TransitionDecision(True)
