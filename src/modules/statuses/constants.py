"""Order status registry constants.

Statuses are data, not an enum: the values below only seed a fresh
database (``manage.py seed_statuses``).  Operators add, edit and retire
statuses at runtime through the registry API.
"""

from __future__ import annotations

import re

SLUG_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]{1,49}$")

# Fields an operator may still edit on a built-in status.
CORE_EDITABLE_FIELDS: frozenset[str] = frozenset(
    {"description", "email_template_id", "send_email_on_enter", "sort_order"}
)

# ``changed_by`` value for history rows written without a human actor.
SYSTEM_ACTOR = "System"

_RED = "bg-red-100 text-red-800 dark:bg-red-900/20 dark:text-red-400"
_GREEN = "bg-green-100 text-green-800 dark:bg-green-900/20 dark:text-green-400"
_PURPLE = "bg-purple-100 text-purple-800 dark:bg-purple-900/20 dark:text-purple-400"
_YELLOW = "bg-yellow-100 text-yellow-800 dark:bg-yellow-900/20 dark:text-yellow-400"


def _status(slug, name, description, icon, color, badge, paid, reports, downloads):
    return {
        "slug": slug,
        "name": name,
        "description": description,
        "icon": icon,
        "color": color,
        "badge_color": badge,
        "is_paid": paid,
        "include_in_reports": reports,
        "allow_downloads": downloads,
    }


CORE_STATUSES: list[dict] = [
    _status("PENDING_PAYMENT", "Pending Payment", "Order created, waiting for payment",
            "Clock", "yellow", _YELLOW, False, False, False),
    _status("PAYMENT_DECLINED", "Payment Declined",
            "Payment was declined by payment processor",
            "XCircle", "red", _RED, False, False, False),
    _status("PAYMENT_FAILED", "Payment Failed",
            "Payment processing encountered an error",
            "AlertCircle", "red", _RED, False, False, False),
    _status("PAID", "Paid", "Payment received and confirmed",
            "DollarSign", "green", _GREEN, True, True, True),
    _status("CONFIRMATION", "Confirmation", "Order confirmed and ready for production",
            "CheckCircle", "blue",
            "bg-blue-100 text-blue-800 dark:bg-blue-900/20 dark:text-blue-400",
            True, True, True),
    _status("ON_HOLD", "On Hold", "Order has an issue that needs resolution",
            "AlertCircle", "orange",
            "bg-orange-100 text-orange-800 dark:bg-orange-900/20 dark:text-orange-400",
            True, True, False),
    _status("PROCESSING", "Processing", "Order is being processed",
            "Package", "purple", _PURPLE, True, True, True),
    _status("PRINTING", "Printing", "Order is currently being printed",
            "Package", "purple", _PURPLE, True, True, True),
    _status("PRODUCTION", "Production", "Order is in production",
            "Package", "purple", _PURPLE, True, True, True),
    _status("SHIPPED", "Shipped", "Order has been shipped",
            "Truck", "teal",
            "bg-teal-100 text-teal-800 dark:bg-teal-900/20 dark:text-teal-400",
            True, True, True),
    _status("READY_FOR_PICKUP", "Ready for Pickup", "Order is ready to be picked up",
            "Package", "cyan",
            "bg-cyan-100 text-cyan-800 dark:bg-cyan-900/20 dark:text-cyan-400",
            True, True, True),
    _status("ON_THE_WAY", "On The Way", "Order is on the way for delivery",
            "Truck", "indigo",
            "bg-indigo-100 text-indigo-800 dark:bg-indigo-900/20 dark:text-indigo-400",
            True, True, True),
    _status("PICKED_UP", "Picked Up", "Order has been picked up by customer",
            "CheckCircle", "green", _GREEN, True, True, True),
    _status("DELIVERED", "Delivered", "Order successfully delivered",
            "CheckCircle", "emerald",
            "bg-emerald-100 text-emerald-800 dark:bg-emerald-900/20 dark:text-emerald-400",
            True, True, True),
    _status("REPRINT", "Reprint", "Order needs to be reprinted",
            "AlertCircle", "yellow", _YELLOW, True, True, False),
    _status("CANCELLED", "Cancelled", "Order has been cancelled",
            "XCircle", "gray",
            "bg-gray-100 text-gray-800 dark:bg-gray-900/20 dark:text-gray-400",
            False, False, False),
    _status("REFUNDED", "Refunded", "Order has been refunded",
            "DollarSign", "red", _RED, False, False, False),
]

DEFAULT_TRANSITIONS: list[tuple[str, str]] = [
    ("PENDING_PAYMENT", "PAYMENT_DECLINED"),
    ("PENDING_PAYMENT", "PAYMENT_FAILED"),
    ("PENDING_PAYMENT", "PAID"),
    ("PENDING_PAYMENT", "CONFIRMATION"),
    ("PENDING_PAYMENT", "CANCELLED"),
    ("PAYMENT_DECLINED", "PENDING_PAYMENT"),
    ("PAYMENT_DECLINED", "CANCELLED"),
    ("PAYMENT_FAILED", "PENDING_PAYMENT"),
    ("PAYMENT_FAILED", "CANCELLED"),
    ("PAID", "CONFIRMATION"),
    ("PAID", "REFUNDED"),
    ("CONFIRMATION", "ON_HOLD"),
    ("CONFIRMATION", "PROCESSING"),
    ("CONFIRMATION", "PRODUCTION"),
    ("CONFIRMATION", "CANCELLED"),
    ("ON_HOLD", "CONFIRMATION"),
    ("ON_HOLD", "PRODUCTION"),
    ("ON_HOLD", "CANCELLED"),
    ("PROCESSING", "PRODUCTION"),
    ("PROCESSING", "ON_HOLD"),
    ("PRINTING", "PRODUCTION"),
    ("PRINTING", "ON_HOLD"),
    ("PRODUCTION", "SHIPPED"),
    ("PRODUCTION", "READY_FOR_PICKUP"),
    ("PRODUCTION", "ON_THE_WAY"),
    ("PRODUCTION", "ON_HOLD"),
    ("PRODUCTION", "REPRINT"),
    ("SHIPPED", "DELIVERED"),
    ("SHIPPED", "REPRINT"),
    ("READY_FOR_PICKUP", "PICKED_UP"),
    ("READY_FOR_PICKUP", "REPRINT"),
    ("ON_THE_WAY", "DELIVERED"),
    ("ON_THE_WAY", "PICKED_UP"),
    ("ON_THE_WAY", "REPRINT"),
    ("PICKED_UP", "REPRINT"),
    ("DELIVERED", "REPRINT"),
    ("REPRINT", "PRODUCTION"),
]

# Edges that move money back to the customer: admin-only when enforced.
ADMIN_ONLY_TRANSITIONS: frozenset[tuple[str, str]] = frozenset(
    {("PAID", "REFUNDED")}
)
