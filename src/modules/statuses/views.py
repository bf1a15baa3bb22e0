"""Status registry API views.

Exposes ``StatusService``, ``TransitionService`` and
``StatusDeletionService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import error_body, error_response
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.statuses.deletion import StatusDeletionService
from modules.statuses.dtos import CreateStatusDTO, CreateTransitionDTO, UpdateStatusDTO
from modules.statuses.exceptions import (
    ConflictRequiresReassignment,
    CoreStatusProtected,
    EmailTemplateNotFound,
    ForbiddenFieldEdit,
    InvalidTransitionEdge,
    ReassignTargetNotFound,
    StatusAlreadyExists,
    StatusNotFound,
    TransitionAlreadyExists,
    TransitionNotFound,
)
from modules.statuses.filters import StatusFilter
from modules.statuses.models import Status, StatusTransition
from modules.statuses.repositories.django_repository import StatusDjangoRepository
from modules.statuses.serializers import (
    CreateStatusSerializer,
    CreateTransitionSerializer,
    StatusSerializer,
    TransitionSerializer,
    UpdateStatusSerializer,
)
from modules.statuses.services import StatusService, TransitionService


def _invalid_payload(exc: PydanticValidationError) -> Response:
    fields = {
        ".".join(str(part) for part in err["loc"]) or "non_field_errors": [err["msg"]]
        for err in exc.errors()
    }
    return Response(
        error_body("validation_error", "Invalid request payload.", {"fields": fields}),
        status=status.HTTP_400_BAD_REQUEST,
    )


class StatusViewSet(GenericViewSet):
    """ViewSet for the status registry.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Status.objects.all()
    filterset_class = StatusFilter
    ordering_fields = ["sort_order", "name", "created_at"]
    ordering = ["sort_order", "name"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    throttle_scope = "status_admin"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        repository = StatusDjangoRepository()
        self._service = StatusService(status_repository=repository)
        self._transitions = TransitionService(status_repository=repository)
        self._deletion = StatusDeletionService(
            status_repository=repository,
            order_repository=OrderDjangoRepository(),
        )

    def get_queryset(self):
        return Status.objects.select_related("email_template")

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/statuses/

        Filtering (``is_active``, ``is_core``, ``is_paid``) is handled by
        ``StatusFilter``.  The registry is small, so results are not paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())
        serializer = StatusSerializer(
            queryset, many=True, context={"order_counts": self._service.order_counts()}
        )
        return Response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/statuses/{pk}/"""
        try:
            detail = self._service.get_status(str(pk))
        except StatusNotFound as exc:
            return error_response(exc, status.HTTP_404_NOT_FOUND)
        return Response(detail.model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Create / Update
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/statuses/"""
        serializer = CreateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateStatusDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return _invalid_payload(exc)

        try:
            created = self._service.create_status(dto)
        except (StatusAlreadyExists, EmailTemplateNotFound) as exc:
            return error_response(exc, status.HTTP_400_BAD_REQUEST)

        out = StatusSerializer(created)
        return Response({"success": True, "status": out.data}, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/statuses/{pk}/

        Only the fields present in the body are considered touched.
        """
        serializer = UpdateStatusSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            dto = UpdateStatusDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return _invalid_payload(exc)

        try:
            updated = self._service.update_status(str(pk), dto)
        except StatusNotFound as exc:
            return error_response(exc, status.HTTP_404_NOT_FOUND)
        except ForbiddenFieldEdit as exc:
            return error_response(exc, status.HTTP_403_FORBIDDEN)
        except EmailTemplateNotFound as exc:
            return error_response(exc, status.HTTP_400_BAD_REQUEST)

        out = StatusSerializer(
            updated, context={"order_counts": self._service.order_counts()}
        )
        return Response({"success": True, "status": out.data})

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/statuses/{pk}/?reassignTo=SLUG

        ``reassign_to`` is accepted as an alias of ``reassignTo``.
        """
        reassign_to = (
            request.query_params.get("reassignTo")
            or request.query_params.get("reassign_to")
            or None
        )

        try:
            result = self._deletion.delete_status(str(pk), reassign_to=reassign_to)
        except StatusNotFound as exc:
            return error_response(exc, status.HTTP_404_NOT_FOUND)
        except CoreStatusProtected as exc:
            return error_response(exc, status.HTTP_403_FORBIDDEN)
        except ConflictRequiresReassignment as exc:
            return error_response(exc, status.HTTP_409_CONFLICT)
        except ReassignTargetNotFound as exc:
            return error_response(exc, status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "success": True,
                "deleted": result.deleted_slug,
                "reassigned_to": result.reassigned_to,
                "reassigned_count": result.reassigned_count,
                "removed_transitions": result.removed_transitions,
            }
        )

    # ------------------------------------------------------------------
    # Transitions (nested)
    # ------------------------------------------------------------------

    @action(detail=True, methods=["get", "post"])
    def transitions(self, request: Request, pk: str | None = None) -> Response:
        """GET/POST /api/v1/statuses/{pk}/transitions/"""
        if request.method == "POST":
            return self._add_transition(request, str(pk))

        try:
            edges = self._transitions.list_transitions(str(pk))
        except StatusNotFound as exc:
            return error_response(exc, status.HTTP_404_NOT_FOUND)
        return Response(
            {
                "inbound": TransitionSerializer(edges["inbound"], many=True).data,
                "outbound": TransitionSerializer(edges["outbound"], many=True).data,
            }
        )

    def _add_transition(self, request: Request, pk: str) -> Response:
        serializer = CreateTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = CreateTransitionDTO(**serializer.validated_data)

        try:
            edge = self._transitions.add_transition(pk, dto)
        except StatusNotFound as exc:
            return error_response(exc, status.HTTP_404_NOT_FOUND)
        except (InvalidTransitionEdge, TransitionAlreadyExists) as exc:
            return error_response(exc, status.HTTP_400_BAD_REQUEST)

        return Response(
            {"success": True, "transition": TransitionSerializer(edge).data},
            status=status.HTTP_201_CREATED,
        )


class TransitionViewSet(GenericViewSet):
    """Removal of individual transition edges."""

    queryset = StatusTransition.objects.all()
    throttle_scope = "status_admin"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._transitions = TransitionService(status_repository=StatusDjangoRepository())

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/transitions/{pk}/"""
        try:
            edge = self._transitions.remove_transition(str(pk))
        except TransitionNotFound as exc:
            return error_response(exc, status.HTTP_404_NOT_FOUND)
        return Response({"success": True, "transition": TransitionSerializer(edge).data})
