"""Status registry URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.statuses.views import StatusViewSet, TransitionViewSet

router = DefaultRouter(trailing_slash=True)
router.register("statuses", StatusViewSet, basename="status")
router.register("transitions", TransitionViewSet, basename="transition")

urlpatterns = router.urls
