"""Analytics URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.analytics.views import AnalyticsView

urlpatterns = [
    path("analytics/", AnalyticsView.as_view(), name="analytics"),
]
