"""Integration tests for the seeding management commands."""

from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command

from modules.orders.models import Order, OrderStatusHistory
from modules.statuses.models import Status, StatusTransition

pytestmark = pytest.mark.integration


class TestSeedStatuses:
    def test_seeds_core_registry(self):
        out = StringIO()
        call_command("seed_statuses", stdout=out)

        assert Status.objects.count() == 17
        assert Status.objects.filter(is_core=True).count() == 17
        assert StatusTransition.objects.count() == 37
        assert StatusTransition.objects.filter(requires_admin=True).count() == 1
        assert "created=17" in out.getvalue()

    def test_idempotent_and_keeps_operator_edits(self):
        call_command("seed_statuses", stdout=StringIO())
        Status.objects.filter(slug="PAID").update(sort_order=99)

        out = StringIO()
        call_command("seed_statuses", stdout=out)

        assert Status.objects.count() == 17
        assert StatusTransition.objects.count() == 37
        assert Status.objects.get(slug="PAID").sort_order == 99
        assert "added=0" in out.getvalue()

    def test_skip_transitions(self):
        call_command("seed_statuses", "--skip-transitions", stdout=StringIO())
        assert Status.objects.count() == 17
        assert not StatusTransition.objects.exists()


class TestSeedData:
    def test_seeds_users_registry_and_orders(self):
        call_command("seed_data", "--orders", "5", stdout=StringIO())

        assert get_user_model().objects.filter(username="admin", is_superuser=True).exists()
        assert Status.objects.count() == 17
        assert Order.objects.count() == 5

    def test_orders_match_their_latest_history_row(self):
        call_command("seed_data", "--orders", "10", stdout=StringIO())

        for order in Order.objects.all():
            rows = list(OrderStatusHistory.objects.filter(order=order))
            assert rows[0].from_status is None
            assert rows[-1].to_status == order.status
            assert rows[0].created_at == order.created_at
