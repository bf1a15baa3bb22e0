"""Domain error base class and the API error envelope.

Every module raises subclasses of ``DomainError``; ``code`` is the
machine-readable kind returned to API clients.  Views translate domain
errors explicitly; ``api_exception_handler`` normalises everything DRF
raises on its own (authentication, parse errors, throttling, database
failures) into the same ``{"error", "detail", "details"?}`` envelope.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business-rule violations."""

    code = "internal"

    def __init__(self, message: str = "", **details: Any) -> None:
        super().__init__(message)
        self.details: Dict[str, Any] = details


def error_body(
    code: str, detail: str, details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": code, "detail": detail}
    if details:
        body["details"] = details
    return body


def error_response(exc: DomainError, http_status: int) -> Response:
    """Render a domain error with the standard envelope."""
    return Response(
        error_body(exc.code, str(exc), exc.details or None), status=http_status
    )


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """DRF ``EXCEPTION_HANDLER`` producing the standard error envelope."""
    if isinstance(exc, DatabaseError):
        logger.error("api.database_error", error=str(exc))
        return Response(
            error_body("internal", "A persistence error occurred."),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, APIException):
        codes = exc.get_codes()
        code = codes if isinstance(codes, str) else "validation_error"
        if isinstance(response.data, dict) and set(response.data) == {"detail"}:
            response.data = error_body(code, str(response.data["detail"]))
        else:
            response.data = error_body(
                code, "Invalid request payload.", {"fields": response.data}
            )
    return response
