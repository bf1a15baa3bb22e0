"""Integration tests for the analytics endpoint."""

from __future__ import annotations

from datetime import timedelta

import pytest
from freezegun import freeze_time

pytestmark = pytest.mark.integration

ANALYTICS_URL = "/api/v1/analytics/"


@pytest.fixture()
def walked_order(make_order, order_service):
    with freeze_time("2025-03-01 09:00:00") as frozen:
        order = make_order()
        frozen.tick(timedelta(hours=1))
        order_service.change_status(str(order.id), "PAID")
        frozen.tick(timedelta(hours=3))
        order_service.change_status(str(order.id), "PRINTING")
    return order


def test_requires_authentication(api_client):
    assert api_client.get(ANALYTICS_URL).status_code == 401


def test_report_for_window(auth_client, walked_order):
    response = auth_client.get(
        ANALYTICS_URL, {"startDate": "2025-03-01", "endDate": "2025-03-01"}
    )

    assert response.status_code == 200
    report = response.json()
    assert report["window"]["end_date"].startswith("2025-03-01T23:59:59")
    paid = next(row for row in report["time_in_status"] if row["status"] == "PAID")
    assert paid["average_hours"] == 3.0
    assert paid["formatted"] == "3.00 hours"
    assert report["order_counts_by_status"] == [
        {"status": "PRINTING", "name": "Printing", "count": 1}
    ]
    assert report["time_series"] == [{"day": "2025-03-01", "count": 1}]
    assert report["summary"]["total_orders"] == 1
    assert report["summary"]["total_statuses"] == 17


def test_past_window_is_deterministic(auth_client, walked_order):
    params = {"start_date": "2025-02-25", "end_date": "2025-03-02"}
    first = auth_client.get(ANALYTICS_URL, params).json()
    second = auth_client.get(ANALYTICS_URL, params).json()
    assert first == second


def test_default_window(auth_client, core_statuses):
    response = auth_client.get(ANALYTICS_URL)
    assert response.status_code == 200
    assert response.json()["summary"]["total_orders"] == 0


def test_start_after_end(auth_client):
    response = auth_client.get(
        ANALYTICS_URL, {"startDate": "2025-03-10", "endDate": "2025-03-01"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_malformed_date(auth_client):
    response = auth_client.get(ANALYTICS_URL, {"startDate": "yesterday"})
    assert response.status_code == 400
    assert "start_date" in response.json()["details"]["fields"]
