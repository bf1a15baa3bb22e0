"""Analytics API view."""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.analytics.exceptions import InvalidReportWindow
from modules.analytics.repositories.django_repository import AnalyticsDjangoRepository
from modules.analytics.serializers import AnalyticsQuerySerializer
from modules.analytics.services import AnalyticsService
from modules.core.exceptions import error_response


class AnalyticsView(APIView):
    """GET /api/v1/analytics/?startDate=YYYY-MM-DD&endDate=YYYY-MM-DD

    Defaults to the trailing ``ANALYTICS_DEFAULT_WINDOW_DAYS`` ending now.
    """

    throttle_scope = "analytics"

    @extend_schema(
        parameters=[
            OpenApiParameter("startDate", str, description="ISO date or datetime"),
            OpenApiParameter("endDate", str, description="ISO date or datetime"),
        ]
    )
    def get(self, request: Request) -> Response:
        query = AnalyticsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        service = AnalyticsService(repository=AnalyticsDjangoRepository())
        try:
            report = service.compute(
                start=query.validated_data.get("start_date"),
                end=query.validated_data.get("end_date"),
            )
        except InvalidReportWindow as exc:
            return error_response(exc, status.HTTP_400_BAD_REQUEST)
        return Response(report.model_dump(mode="json"))
