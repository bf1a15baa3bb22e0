"""Analytics domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import DomainError


class InvalidReportWindow(DomainError):
    """The requested window is empty or inverted."""

    code = "validation_error"
