"""Unit tests for Order and OrderStatusHistory models."""

from __future__ import annotations

import re

import pytest
from django.db import IntegrityError
from freezegun import freeze_time

from modules.core.models import ImmutableRecordError
from modules.orders.models import Order

pytestmark = pytest.mark.unit


class TestOrder:
    @freeze_time("2025-04-02 08:00:00")
    def test_order_number_format(self):
        order = Order.objects.create(status="PENDING_PAYMENT")
        assert re.fullmatch(r"ORD-20250402-[0-9A-F]{6}", order.order_number)

    def test_order_number_kept_on_update(self):
        order = Order.objects.create(status="PENDING_PAYMENT")
        number = order.order_number
        order.status = "PAID"
        order.save()
        order.refresh_from_db()
        assert order.order_number == number

    def test_order_number_unique(self):
        first = Order.objects.create(status="PAID")
        with pytest.raises(IntegrityError):
            Order.objects.bulk_create([Order(status="PAID", order_number=first.order_number)])

    def test_status_is_plain_text(self):
        order = Order.objects.create(status="NOT_IN_REGISTRY")
        order.refresh_from_db()
        assert order.status == "NOT_IN_REGISTRY"


class TestOrderStatusHistory:
    def test_rows_are_append_only(self, make_order):
        order = make_order()
        row = order.status_history.first()
        row.notes = "rewritten"
        with pytest.raises(ImmutableRecordError):
            row.save()
        with pytest.raises(ImmutableRecordError):
            row.delete()

    def test_default_ordering_is_chronological(self, make_order, order_service):
        order = make_order()
        order_service.change_status(str(order.id), "PAID")
        order_service.change_status(str(order.id), "PRINTING")
        slugs = list(order.status_history.values_list("to_status", flat=True))
        assert slugs == ["PENDING_PAYMENT", "PAID", "PRINTING"]
