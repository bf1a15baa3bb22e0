"""Status and StatusTransition models.

Business rules implemented:
- ``slug`` is the status identity: unique and never changed after creation.
- Core (built-in) statuses cannot be deleted and only accept edits to the
  fields listed in ``CORE_EDITABLE_FIELDS`` (enforced at service layer).
- Transition edges are unique per ``(from_status, to_status)`` pair and
  never loop back onto the same status.  Edges use ``PROTECT``: retiring a
  status removes its edges explicitly before the status row goes away.
- Orders reference statuses by ``slug`` (plain text), so retiring a status
  leaves the order audit trail untouched.
"""

from __future__ import annotations

from typing import Any

import structlog
from django.core.exceptions import ValidationError
from django.db import models

from modules.core.models import BaseModel
from modules.statuses.constants import SLUG_PATTERN

logger = structlog.get_logger(__name__)


class Status(BaseModel):
    """A named order lifecycle stage, defined as data."""

    slug: models.CharField = models.CharField(max_length=50, unique=True)
    name: models.CharField = models.CharField(max_length=100)
    description: models.TextField = models.TextField(blank=True, default="")
    icon: models.CharField = models.CharField(max_length=50, blank=True, default="")
    color: models.CharField = models.CharField(max_length=30, blank=True, default="")
    badge_color: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )
    is_core: models.BooleanField = models.BooleanField(default=False)
    is_paid: models.BooleanField = models.BooleanField(default=False)
    include_in_reports: models.BooleanField = models.BooleanField(default=True)
    allow_downloads: models.BooleanField = models.BooleanField(default=False)
    sort_order: models.IntegerField = models.IntegerField(default=0)
    is_active: models.BooleanField = models.BooleanField(default=True)
    email_template: models.ForeignKey = models.ForeignKey(
        "notifications.EmailTemplate",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="statuses",
    )
    send_email_on_enter: models.BooleanField = models.BooleanField(default=False)

    class Meta:
        db_table = "order_statuses"
        ordering = ["sort_order", "name"]
        indexes = [
            models.Index(fields=["is_active"], name="order_statuses_active_idx"),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.slug and not SLUG_PATTERN.match(self.slug):
            raise ValidationError(
                {"slug": "Use 2-50 upper-case letters, digits or underscores."}
            )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self._state.adding:
            stored = (
                Status.objects.filter(pk=self.pk).values_list("slug", flat=True).first()
            )
            if stored is not None and stored != self.slug:
                raise ValidationError({"slug": "Status slug cannot be changed."})
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info("status.created", status_id=str(self.id), slug=self.slug)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.name} ({self.slug})"


class StatusTransition(BaseModel):
    """Directed edge: orders on ``from_status`` may move to ``to_status``.

    ``requires_admin`` edges are only traversable by admin actors when the
    transition graph is enforced.
    """

    from_status: models.ForeignKey = models.ForeignKey(
        "statuses.Status",
        on_delete=models.PROTECT,
        related_name="outbound_transitions",
    )
    to_status: models.ForeignKey = models.ForeignKey(
        "statuses.Status",
        on_delete=models.PROTECT,
        related_name="inbound_transitions",
    )
    requires_admin: models.BooleanField = models.BooleanField(default=False)

    class Meta:
        db_table = "status_transitions"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["from_status", "to_status"],
                name="status_transitions_unique_pair",
            ),
            models.CheckConstraint(
                condition=~models.Q(from_status=models.F("to_status")),
                name="status_transitions_no_self_loop",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.from_status.slug} -> {self.to_status.slug}"
