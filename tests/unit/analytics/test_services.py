"""Unit tests for AnalyticsService against the Django read model."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from freezegun import freeze_time

from modules.analytics.exceptions import InvalidReportWindow
from modules.analytics.repositories.django_repository import AnalyticsDjangoRepository
from modules.analytics.services import AnalyticsService
from modules.statuses.models import Status

pytestmark = pytest.mark.unit

T0 = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
HOUR_MS = 3_600_000


@pytest.fixture()
def service_at():
    def _build(now: datetime) -> AnalyticsService:
        return AnalyticsService(AnalyticsDjangoRepository(), clock=lambda: now)

    return _build


@pytest.fixture()
def walked_order(make_order, order_service):
    """PENDING_PAYMENT(t0) -> PAID(t0+1h) -> PRINTING(t0+4h)."""
    with freeze_time(T0) as frozen:
        order = make_order()
        frozen.tick(timedelta(hours=1))
        order_service.change_status(str(order.id), "PAID")
        frozen.tick(timedelta(hours=3))
        order_service.change_status(str(order.id), "PRINTING")
    return order


def _dwell(report, slug):
    return next(item for item in report.time_in_status if item.status == slug)


class TestCompute:
    def test_time_in_paid_is_three_hours(self, walked_order, service_at):
        report = service_at(T0 + timedelta(hours=6)).compute(
            T0 - timedelta(days=1), T0 + timedelta(days=1)
        )
        paid = _dwell(report, "PAID")
        assert paid.average_ms == 3 * HOUR_MS
        assert paid.average_hours == 3.0
        assert paid.formatted == "3.00 hours"
        assert paid.samples == 1

        # Open interval ends at now (t0+6h), before the window end
        assert _dwell(report, "PRINTING").average_ms == 2 * HOUR_MS
        assert report.window.as_of == T0 + timedelta(hours=6)

    def test_counts_and_summary(self, walked_order, make_order, service_at):
        with freeze_time(T0 + timedelta(hours=2)):
            make_order("PAID")

        report = service_at(T0 + timedelta(hours=6)).compute(
            T0 - timedelta(days=1), T0 + timedelta(days=1)
        )
        counts = {row.status: row.count for row in report.order_counts_by_status}
        assert counts == {"PRINTING": 1, "PAID": 1}
        assert report.order_counts_by_status[0].name

        summary = report.summary
        assert summary.total_orders == 2
        assert summary.active_statuses == 2
        assert summary.total_statuses == 17
        # (6h + 4h) / 2 orders
        assert summary.exact_average_processing_time.hours == 5.0
        assert summary.slowest_status == "PAID"
        assert report.bottlenecks[0].status == "PAID"

    def test_transition_matrix(self, walked_order, service_at):
        report = service_at(T0 + timedelta(hours=6)).compute(
            T0 - timedelta(days=1), T0 + timedelta(days=1)
        )
        edges = {(e.from_status, e.to_status): e.count for e in report.transition_matrix}
        assert edges == {("PENDING_PAYMENT", "PAID"): 1, ("PAID", "PRINTING"): 1}

    def test_time_series_is_zero_filled(self, walked_order, service_at):
        report = service_at(T0 + timedelta(days=5)).compute(
            T0 - timedelta(days=2), T0 + timedelta(days=2)
        )
        assert [(p.day.isoformat(), p.count) for p in report.time_series] == [
            ("2025-02-27", 0),
            ("2025-02-28", 0),
            ("2025-03-01", 1),
            ("2025-03-02", 0),
            ("2025-03-03", 0),
        ]

    def test_window_end_caps_open_interval(self, walked_order, service_at):
        end = T0 + timedelta(hours=2)
        report = service_at(T0 + timedelta(days=30)).compute(T0 - timedelta(days=1), end)
        assert report.window.as_of == end
        assert _dwell(report, "PAID").average_ms == HOUR_MS
        assert all(item.status != "PRINTING" for item in report.time_in_status)

    def test_order_stuck_since_before_window_is_tracked(self, make_order, service_at):
        with freeze_time(T0):
            make_order()

        report = service_at(T0 + timedelta(days=40)).compute()

        pending = _dwell(report, "PENDING_PAYMENT")
        assert pending.average_days == 40.0
        assert report.bottlenecks[0].status == "PENDING_PAYMENT"
        assert report.summary.exact_average_processing_time.days == 40.0
        # Created before the window, so not counted as a new order
        assert report.summary.total_orders == 0

    def test_order_created_after_window_is_ignored(self, make_order, service_at):
        with freeze_time(T0):
            make_order()

        report = service_at(T0 + timedelta(days=1)).compute(
            T0 - timedelta(days=3), T0 - timedelta(days=1)
        )
        assert report.time_in_status == []
        assert report.bottlenecks == []

    def test_empty_window(self, core_statuses, service_at):
        report = service_at(T0).compute(T0 - timedelta(days=1), T0)
        assert report.order_counts_by_status == []
        assert report.time_in_status == []
        assert report.summary.total_orders == 0
        assert report.summary.slowest_status is None
        assert report.summary.average_processing_time.formatted == "0 minutes"

    def test_deleted_status_falls_back_to_slug(self, make_order, make_status, service_at):
        make_status("AWAITING_PROOF")
        with freeze_time(T0):
            make_order("AWAITING_PROOF")

        Status.objects.filter(slug="AWAITING_PROOF").delete()
        report = service_at(T0 + timedelta(hours=1)).compute(
            T0 - timedelta(days=1), T0 + timedelta(days=1)
        )
        assert _dwell(report, "AWAITING_PROOF").name == "AWAITING_PROOF"


class TestDeterminism:
    def test_same_window_same_result(self, walked_order, service_at):
        start, end = T0 - timedelta(days=1), T0 + timedelta(days=1)
        first = service_at(T0 + timedelta(days=3)).compute(start, end)
        second = service_at(T0 + timedelta(days=9)).compute(start, end)
        assert first == second

    def test_open_dwell_grows_between_calls(self, make_order):
        service = AnalyticsService(AnalyticsDjangoRepository())
        with freeze_time(T0) as frozen:
            make_order()
            frozen.tick(timedelta(minutes=5))
            first = _dwell(service.compute(), "PENDING_PAYMENT").average_ms
            frozen.tick(timedelta(minutes=5))
            second = _dwell(service.compute(), "PENDING_PAYMENT").average_ms
        assert first == 5 * 60_000
        assert second > first


class TestResolveWindow:
    def test_defaults(self, service_at, settings):
        settings.STATUS_WORKFLOW = {
            **settings.STATUS_WORKFLOW,
            "ANALYTICS_DEFAULT_WINDOW_DAYS": 7,
        }
        start, end = service_at(T0).resolve_window()
        assert end == T0
        assert start == T0 - timedelta(days=7)

    def test_start_after_end(self, service_at):
        with pytest.raises(InvalidReportWindow):
            service_at(T0).resolve_window(T0, T0 - timedelta(seconds=1))
