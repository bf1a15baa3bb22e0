from __future__ import annotations

from decimal import Decimal
from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.management import call_command
from rest_framework.test import APIClient

from modules.orders.dtos import CreateOrderDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderStatusService
from modules.statuses.models import Status
from modules.statuses.repositories.django_repository import StatusDjangoRepository

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _reset_throttles():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        username="ops-admin", password="testpass123", is_staff=True
    )


@pytest.fixture()
def auth_client(admin_user):
    """APIClient force-authenticated as a staff user."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture()
def staff_less_client():
    """APIClient force-authenticated as a regular (non-admin) user."""
    client = APIClient()
    user = User.objects.create_user(username="clerk", password="testpass123")
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def core_statuses():
    """The built-in statuses and default transition graph."""
    call_command("seed_statuses", stdout=StringIO())
    return {status.slug: status for status in Status.objects.all()}


@pytest.fixture()
def make_status():
    def _make(slug: str, **overrides) -> Status:
        defaults = {"name": slug.replace("_", " ").title()}
        defaults.update(overrides)
        return Status.objects.create(slug=slug, **defaults)

    return _make


@pytest.fixture()
def order_service():
    return OrderStatusService(
        order_repository=OrderDjangoRepository(),
        status_repository=StatusDjangoRepository(),
    )


@pytest.fixture()
def make_order(order_service, core_statuses):
    """Create an order (with its creation history row) on *status*."""

    def _make(status: str = "PENDING_PAYMENT", **overrides):
        data = {
            "customer_name": "Jane Buyer",
            "customer_email": "jane@example.com",
            "total_amount": Decimal("120.50"),
            "status": status,
        }
        data.update(overrides)
        return order_service.create_order(CreateOrderDTO(**data))

    return _make
