from __future__ import annotations

import random
from collections import defaultdict
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from modules.orders.models import Order, OrderStatusHistory
from modules.statuses.constants import DEFAULT_TRANSITIONS, SYSTEM_ACTOR
from modules.statuses.models import Status

CUSTOMERS = [
    ("Ana Souza", "ana@example.com"),
    ("Bruno Lima", "bruno@example.com"),
    ("Carla Mendes", "carla@example.com"),
    ("Daniel Costa", "daniel@example.com"),
    ("Eduardo Alves", "eduardo@example.com"),
    ("Fernanda Rocha", "fernanda@example.com"),
    ("Gabriel Santos", "gabriel@example.com"),
    ("Helena Ferreira", "helena@example.com"),
    ("Igor Ramos", "igor@example.com"),
    ("Julia Oliveira", "julia@example.com"),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=50)

    @transaction.atomic
    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        call_command("seed_statuses", stdout=self.stdout)
        orders_created = self._seed_orders(options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="manager").exists():
            User.objects.create_user(
                "manager", password="manager123", is_staff=True
            )
            created += 1
        if not User.objects.filter(username="user").exists():
            User.objects.create_user("user", password="user123")
            created += 1
        return created

    def _seed_orders(self, count: int) -> int:
        """Orders walked along the default graph with backdated history."""
        self.stdout.write("Creating orders...")
        graph = defaultdict(list)
        for from_slug, to_slug in DEFAULT_TRANSITIONS:
            graph[from_slug].append(to_slug)
        paid = set(Status.objects.filter(is_paid=True).values_list("slug", flat=True))

        now = timezone.now()
        for _ in range(count):
            name, email = random.choice(CUSTOMERS)
            created_at = now - timedelta(days=random.randint(1, 30), hours=random.randint(0, 23))

            path = [(created_at, "PENDING_PAYMENT")]
            moment = created_at
            for _step in range(random.randint(0, 6)):
                options = graph.get(path[-1][1])
                if not options:
                    break
                moment += timedelta(hours=random.randint(1, 72))
                if moment >= now:
                    break
                path.append((moment, random.choice(options)))

            first_paid = next((ts for ts, slug in path if slug in paid), None)
            order = Order.objects.create(
                customer_name=name,
                customer_email=email,
                total_amount=Decimal(random.randint(1500, 250000)) / 100,
                status=path[-1][1],
                paid_at=first_paid,
            )
            Order.objects.filter(id=order.id).update(created_at=created_at)

            previous = None
            for index, (moment, slug) in enumerate(path):
                row = OrderStatusHistory.objects.create(
                    order=order,
                    from_status=previous,
                    to_status=slug,
                    notes="Order created" if index == 0 else "",
                    changed_by=SYSTEM_ACTOR if index == 0 else "Admin",
                )
                # Backdating is a seeding concern only; the model API forbids updates.
                OrderStatusHistory.objects.filter(id=row.id).update(created_at=moment)
                previous = slug

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return count
