from __future__ import annotations

from django.core.management.base import BaseCommand
from django.db import transaction

from modules.statuses.constants import (
    ADMIN_ONLY_TRANSITIONS,
    CORE_STATUSES,
    DEFAULT_TRANSITIONS,
)
from modules.statuses.models import Status, StatusTransition


class Command(BaseCommand):
    help = "Create or refresh the built-in order statuses and their default transitions."

    def add_arguments(self, parser):
        parser.add_argument(
            "--skip-transitions",
            action="store_true",
            help="Only upsert statuses; leave the transition graph untouched.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding core statuses...")
        created, updated = self._seed_statuses()
        self.stdout.write(
            self.style.SUCCESS(f"Seeding core statuses... Done! created={created}, updated={updated}")
        )

        if options["skip_transitions"]:
            return

        self.stdout.write("Seeding transitions...")
        added = self._seed_transitions()
        self.stdout.write(self.style.SUCCESS(f"Seeding transitions... Done! added={added}"))

    def _seed_statuses(self) -> tuple[int, int]:
        created = updated = 0
        for position, definition in enumerate(CORE_STATUSES):
            defaults = {key: value for key, value in definition.items() if key != "slug"}
            defaults.update({"is_core": True, "sort_order": position})
            status = Status.objects.filter(slug=definition["slug"]).first()
            if status is None:
                Status.objects.create(slug=definition["slug"], is_active=True, **defaults)
                created += 1
                continue
            # Operators may have re-ordered statuses; keep their sort_order.
            defaults.pop("sort_order")
            for field_name, value in defaults.items():
                setattr(status, field_name, value)
            status.save()
            updated += 1
        return created, updated

    def _seed_transitions(self) -> int:
        by_slug = {
            status.slug: status
            for status in Status.objects.filter(slug__in=[s["slug"] for s in CORE_STATUSES])
        }
        added = 0
        for from_slug, to_slug in DEFAULT_TRANSITIONS:
            _, created = StatusTransition.objects.get_or_create(
                from_status=by_slug[from_slug],
                to_status=by_slug[to_slug],
                defaults={"requires_admin": (from_slug, to_slug) in ADMIN_ONLY_TRANSITIONS},
            )
            added += int(created)
        return added
