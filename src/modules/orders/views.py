"""Order API views.

Exposes the ``OrderStatusService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import error_response
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.constants import DEFAULT_ACTOR
from modules.orders.dtos import ChangeStatusDTO
from modules.orders.exceptions import InvalidTransition, OrderNotFound, StatusRejected
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    ChangeStatusSerializer,
    OrderListSerializer,
    OrderSerializer,
)
from modules.orders.services import OrderStatusService
from modules.statuses.repositories.django_repository import StatusDjangoRepository


class OrderViewSet(GenericViewSet):
    """ViewSet for order reads and status changes.

    Uses ``OrderStatusService`` with injected repositories (DIP).
    Orders are created by the storefront checkout, not through this API.
    """

    queryset = Order.objects.all()
    filterset_class = OrderFilter
    search_fields = ["order_number", "customer_name", "customer_email"]
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderStatusService(
            order_repository=OrderDjangoRepository(),
            status_repository=StatusDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Status changes share the registry admin throttle scope."""
        self.throttle_scope = "status_admin" if self.action == "change_status" else None
        return super().get_throttles()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return Order.objects.all()

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, date range, total range, paid) is handled
        by ``OrderFilter`` via ``filter_backends``.  Ordering is handled
        by ``OrderingFilter``.  Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(str(pk))
        except OrderNotFound as exc:
            return error_response(exc, status.HTTP_404_NOT_FOUND)
        serializer = OrderSerializer(order)
        return Response(serializer.data)

    # ------------------------------------------------------------------
    # Status change
    # ------------------------------------------------------------------

    @action(detail=True, methods=["patch"], url_path="status", url_name="status")
    def change_status(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/status/

        Body: ``{"status": "SHIPPED", "notes": "..."}``.  The acting user's
        name is recorded in the history row; staff users count as admins.
        """
        serializer = ChangeStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        dto = ChangeStatusDTO(
            status=serializer.validated_data["status"],
            notes=serializer.validated_data["notes"],
            changed_by=user.get_username() or DEFAULT_ACTOR,
            actor_is_admin=bool(user.is_staff),
        )

        try:
            order = self._service.apply(str(pk), dto)
        except OrderNotFound as exc:
            return error_response(exc, status.HTTP_404_NOT_FOUND)
        except StatusRejected as exc:
            return error_response(exc, status.HTTP_400_BAD_REQUEST)
        except InvalidTransition as exc:
            return error_response(exc, status.HTTP_409_CONFLICT)

        return Response({"success": True, "order": OrderSerializer(order).data})

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @action(detail=True, methods=["get"])
    def history(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/history/ (oldest first)"""
        try:
            rows = self._service.get_history(str(pk))
        except OrderNotFound as exc:
            return error_response(exc, status.HTTP_404_NOT_FOUND)
        return Response([row.model_dump(mode="json") for row in rows])
