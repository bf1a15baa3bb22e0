from __future__ import annotations

import pytest

from modules.notifications.rendering import render_template

pytestmark = pytest.mark.unit

VARIABLES = {
    "orderNumber": "ORD-20250301-ABC123",
    "customerName": "Jane <Buyer>",
    "trackingNumber": None,
}


def test_double_brace_placeholders():
    assert render_template("Order {{orderNumber}}", VARIABLES) == "Order ORD-20250301-ABC123"


def test_single_brace_placeholders():
    assert render_template("Hi {customerName}", VARIABLES) == "Hi Jane <Buyer>"


def test_whitespace_inside_braces():
    assert render_template("{{ orderNumber }}", VARIABLES) == "ORD-20250301-ABC123"


def test_unknown_placeholder_left_untouched():
    assert render_template("{{couponCode}} / {coupon}", VARIABLES) == "{{couponCode}} / {coupon}"


def test_none_renders_empty():
    assert render_template("Tracking: {{trackingNumber}}.", VARIABLES) == "Tracking: ."


def test_html_escapes_values():
    rendered = render_template("<p>{{customerName}}</p>", VARIABLES, html=True)
    assert rendered == "<p>Jane &lt;Buyer&gt;</p>"


def test_empty_template():
    assert render_template("", VARIABLES) == ""
