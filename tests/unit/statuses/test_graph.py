"""Unit tests for the transition graph and transition policy."""

from __future__ import annotations

import pytest

from modules.statuses.graph import Edge, TransitionGraph, TransitionPolicy

pytestmark = pytest.mark.unit


@pytest.fixture()
def graph():
    return TransitionGraph(
        [
            Edge("PENDING_PAYMENT", "PAID"),
            Edge("PENDING_PAYMENT", "CANCELLED"),
            Edge("PAID", "PRINTING"),
            Edge("PAID", "REFUNDED", requires_admin=True),
        ]
    )


class TestTransitionGraph:
    def test_outbound_and_inbound(self, graph):
        assert graph.outbound("PENDING_PAYMENT") == ["CANCELLED", "PAID"]
        assert graph.inbound("PAID") == ["PENDING_PAYMENT"]
        assert graph.inbound("PENDING_PAYMENT") == []

    def test_has_edge_is_directed(self, graph):
        assert graph.has_edge("PENDING_PAYMENT", "PAID")
        assert not graph.has_edge("PAID", "PENDING_PAYMENT")

    def test_terminal_means_no_outbound_edges(self, graph):
        assert graph.is_terminal("CANCELLED")
        assert graph.is_terminal("UNKNOWN")
        assert not graph.is_terminal("PAID")

    def test_len_counts_edges(self, graph):
        assert len(graph) == 4

    def test_edge_keeps_admin_flag(self, graph):
        assert graph.edge("PAID", "REFUNDED").requires_admin is True
        assert graph.edge("PAID", "PRINTING").requires_admin is False


class TestPermissivePolicy:
    def test_any_other_status_allowed_without_edges(self):
        decision = TransitionPolicy(enforce_transition_graph=False).evaluate(
            TransitionGraph(), "PENDING_PAYMENT", "SHIPPED"
        )
        assert decision.allowed

    def test_same_status_rejected(self, graph):
        decision = TransitionPolicy().evaluate(graph, "PAID", "PAID")
        assert not decision.allowed
        assert "already" in decision.reason


class TestStrictPolicy:
    @pytest.fixture()
    def policy(self):
        return TransitionPolicy(enforce_transition_graph=True)

    def test_registered_edge_allowed(self, policy, graph):
        assert policy.evaluate(graph, "PENDING_PAYMENT", "PAID").allowed

    def test_missing_edge_rejected(self, policy, graph):
        decision = policy.evaluate(graph, "PENDING_PAYMENT", "PRINTING")
        assert not decision.allowed
        assert "PENDING_PAYMENT" in decision.reason

    def test_terminal_status_rejects_everything(self, policy, graph):
        decision = policy.evaluate(graph, "CANCELLED", "PAID")
        assert not decision.allowed
        assert "terminal" in decision.reason

    def test_admin_only_edge(self, policy, graph):
        assert not policy.evaluate(graph, "PAID", "REFUNDED", actor_is_admin=False).allowed
        assert policy.evaluate(graph, "PAID", "REFUNDED", actor_is_admin=True).allowed


def test_policy_reads_settings(settings):
    settings.STATUS_WORKFLOW = {**settings.STATUS_WORKFLOW, "ENFORCE_TRANSITION_GRAPH": True}
    assert TransitionPolicy.from_settings().enforce_transition_graph is True
