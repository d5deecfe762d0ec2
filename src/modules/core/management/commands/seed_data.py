from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.accounts.models import Role
from modules.products.models import Product

USERS = [
    ("admin@example.com", "admin123", Role.ADMIN),
    ("customer@example.com", "customer123", Role.CUSTOMER),
]

# (name, price in cents, stock)
CATALOG = [
    ("Laptop", 99999, 10),
    ("Mouse", 2999, 50),
    ("Keyboard", 4999, 30),
    ("Monitor", 29999, 15),
    ("Headphones", 7999, 25),
]


class Command(BaseCommand):
    help = "Seed database with development users and sample products."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete existing products before seeding.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        if options["reset"]:
            deleted, _ = Product.objects.filter(order_items__isnull=True).delete()
            self.stdout.write(f"Removed {deleted} unreferenced products.")

        users_created = self._seed_users()
        products_created = self._seed_products()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"products={products_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        for email, password, role in USERS:
            if User.objects.filter(email=email).exists():
                continue
            User.objects.create_user(email=email, password=password, role=role)
            created += 1
        return created

    def _seed_products(self) -> int:
        created = 0
        for name, price, stock in CATALOG:
            _, was_created = Product.objects.get_or_create(
                name=name,
                defaults={"price": price, "stock": stock},
            )
            created += int(was_created)
        return created
