"""Status registry DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.statuses.models import Status, StatusTransition

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateStatusSerializer(serializers.Serializer):
    """Validates the status creation request payload."""

    slug = serializers.CharField(max_length=50)
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    icon = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    color = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")
    badge_color = serializers.CharField(
        max_length=255, required=False, allow_blank=True, default=""
    )
    is_paid = serializers.BooleanField(required=False, default=False)
    include_in_reports = serializers.BooleanField(required=False, default=True)
    allow_downloads = serializers.BooleanField(required=False, default=False)
    sort_order = serializers.IntegerField(required=False, default=0)
    is_active = serializers.BooleanField(required=False, default=True)
    email_template_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    send_email_on_enter = serializers.BooleanField(required=False, default=False)


class UpdateStatusSerializer(serializers.Serializer):
    """Validates partial updates.

    ``slug`` and ``is_core`` are accepted so the service can report them as
    forbidden edits instead of silently dropping them.
    """

    slug = serializers.CharField(required=False)
    is_core = serializers.BooleanField(required=False)
    name = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    icon = serializers.CharField(max_length=50, required=False, allow_blank=True)
    color = serializers.CharField(max_length=30, required=False, allow_blank=True)
    badge_color = serializers.CharField(max_length=255, required=False, allow_blank=True)
    is_paid = serializers.BooleanField(required=False)
    include_in_reports = serializers.BooleanField(required=False)
    allow_downloads = serializers.BooleanField(required=False)
    sort_order = serializers.IntegerField(required=False)
    is_active = serializers.BooleanField(required=False)
    email_template_id = serializers.UUIDField(required=False, allow_null=True)
    send_email_on_enter = serializers.BooleanField(required=False)


class CreateTransitionSerializer(serializers.Serializer):
    """Validates a new outbound edge."""

    to_status_id = serializers.UUIDField()
    requires_admin = serializers.BooleanField(required=False, default=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusSerializer(serializers.ModelSerializer):
    """Read serializer for statuses (list and write responses).

    ``order_count`` is taken from the ``order_counts`` context mapping
    (slug -> count) when the view provides one.
    """

    email_template_id = serializers.UUIDField(read_only=True, allow_null=True)
    order_count = serializers.SerializerMethodField()
    can_delete = serializers.SerializerMethodField()

    class Meta:
        model = Status
        fields = [
            "id",
            "slug",
            "name",
            "description",
            "icon",
            "color",
            "badge_color",
            "is_core",
            "is_paid",
            "include_in_reports",
            "allow_downloads",
            "sort_order",
            "is_active",
            "email_template_id",
            "send_email_on_enter",
            "order_count",
            "can_delete",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_order_count(self, obj: Status) -> int:
        return self.context.get("order_counts", {}).get(obj.slug, 0)

    def get_can_delete(self, obj: Status) -> bool:
        return not obj.is_core and self.get_order_count(obj) == 0


class TransitionSerializer(serializers.ModelSerializer):
    """Read serializer for transition edges."""

    from_status = serializers.CharField(source="from_status.slug", read_only=True)
    to_status = serializers.CharField(source="to_status.slug", read_only=True)

    class Meta:
        model = StatusTransition
        fields = [
            "id",
            "from_status",
            "to_status",
            "from_status_id",
            "to_status_id",
            "requires_admin",
            "created_at",
        ]
        read_only_fields = fields
