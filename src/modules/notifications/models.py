"""E-mail templates bound to order statuses.

A template is rendered when an order enters a status whose
``send_email_on_enter`` flag is set.  ``subject``, ``html_content`` and
``text_content`` may reference the variables listed in
``modules.notifications.rendering.TEMPLATE_VARIABLES`` as ``{{name}}`` or
``{name}``.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class EmailTemplate(BaseModel):
    name: models.CharField = models.CharField(max_length=120, unique=True)
    subject: models.CharField = models.CharField(max_length=255)
    html_content: models.TextField = models.TextField(blank=True, default="")
    text_content: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "email_templates"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name
