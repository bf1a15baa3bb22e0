"""Integration tests for standardized error responses."""

from unittest.mock import patch

import pytest
from django.db import DatabaseError

pytestmark = pytest.mark.integration


class TestStandardizedErrors:
    def test_auth_error_has_standard_format(self, api_client):
        response = api_client.get("/api/v1/statuses/")
        assert response.status_code == 401
        data = response.json()
        assert data["error"] == "not_authenticated"
        assert data["detail"]
        assert "details" not in data

    def test_parse_error_has_standard_format(self, auth_client):
        response = auth_client.post(
            "/api/v1/statuses/", data="{", content_type="application/json"
        )
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "parse_error"
        assert data["detail"]

    def test_validation_error_lists_fields(self, auth_client):
        response = auth_client.post("/api/v1/statuses/", {"name": "No slug"}, format="json")
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "validation_error"
        assert "slug" in data["details"]["fields"]

    def test_domain_error_has_standard_format(self, auth_client, core_statuses):
        paid = core_statuses["PAID"]
        response = auth_client.delete(f"/api/v1/statuses/{paid.id}/")
        assert response.status_code == 403
        assert response.json()["error"] == "rejected"

    def test_domain_error_details(self, auth_client, make_status, make_order):
        status = make_status("AWAITING_PROOF")
        make_order("AWAITING_PROOF")
        response = auth_client.delete(f"/api/v1/statuses/{status.id}/")
        assert response.status_code == 409
        assert response.json()["details"] == {"order_count": 1}

    def test_database_error_is_internal(self, auth_client, core_statuses):
        with patch(
            "modules.statuses.views.StatusService.order_counts",
            side_effect=DatabaseError("connection lost"),
        ):
            response = auth_client.get("/api/v1/statuses/")
        assert response.status_code == 500
        assert response.json() == {
            "error": "internal",
            "detail": "A persistence error occurred.",
        }
