import django.db.models.deletion
import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("notifications", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Status",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("slug", models.CharField(max_length=50, unique=True)),
                ("name", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True, default="")),
                ("icon", models.CharField(blank=True, default="", max_length=50)),
                ("color", models.CharField(blank=True, default="", max_length=30)),
                ("badge_color", models.CharField(blank=True, default="", max_length=255)),
                ("is_core", models.BooleanField(default=False)),
                ("is_paid", models.BooleanField(default=False)),
                ("include_in_reports", models.BooleanField(default=True)),
                ("allow_downloads", models.BooleanField(default=False)),
                ("sort_order", models.IntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                ("send_email_on_enter", models.BooleanField(default=False)),
                (
                    "email_template",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="statuses",
                        to="notifications.emailtemplate",
                    ),
                ),
            ],
            options={
                "db_table": "order_statuses",
                "ordering": ["sort_order", "name"],
                "indexes": [
                    models.Index(fields=["is_active"], name="order_statuses_active_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StatusTransition",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("requires_admin", models.BooleanField(default=False)),
                (
                    "from_status",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="outbound_transitions",
                        to="statuses.status",
                    ),
                ),
                (
                    "to_status",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="inbound_transitions",
                        to="statuses.status",
                    ),
                ),
            ],
            options={
                "db_table": "status_transitions",
                "ordering": ["created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("from_status", "to_status"),
                        name="status_transitions_unique_pair",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("from_status", models.F("to_status")), _negated=True
                        ),
                        name="status_transitions_no_self_loop",
                    ),
                ],
            },
        ),
    ]
