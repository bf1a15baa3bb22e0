"""Placeholder substitution for status e-mails.

Both ``{{orderNumber}}`` and ``{orderNumber}`` forms are accepted (the
back-office editor has produced both over time).  Unknown placeholders are
left untouched so a typo is visible in the delivered message instead of
silently disappearing.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from django.utils.html import escape

TEMPLATE_VARIABLES = (
    "orderNumber",
    "customerName",
    "statusName",
    "trackingNumber",
    "trackingUrl",
    "orderUrl",
    "notes",
    "total",
)

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}|\{(\w+)\}")


def render_template(
    template: str, variables: Mapping[str, Any], *, html: bool = False
) -> str:
    """Replace placeholders in *template* with values from *variables*.

    ``None`` renders as an empty string.  With ``html=True`` values are
    HTML-escaped before insertion.
    """

    def _substitute(match: re.Match) -> str:
        name = match.group(1) or match.group(2)
        if name not in variables:
            return match.group(0)
        value = variables[name]
        text = "" if value is None else str(value)
        return escape(text) if html else text

    return _PLACEHOLDER.sub(_substitute, template or "")
