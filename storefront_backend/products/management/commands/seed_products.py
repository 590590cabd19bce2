from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from products.models import Product

SAMPLE_PRODUCTS = [
    ("wireless-bluetooth-headphones", "Wireless Bluetooth Headphones", "149.99", "10", 50),
    ("smart-watch-pro", "Smart Watch Pro", "299.99", "0", 30),
    ("ultra-slim-laptop", "Ultra-Slim Laptop", "999.99", "0", 20),
    ("classic-cotton-tshirt", "Classic Cotton T-Shirt", "29.99", "15", 200),
    ("slim-fit-jeans", "Slim Fit Jeans", "49.99", "0", 150),
    ("hooded-sweatshirt", "Hooded Sweatshirt", "59.99", "0", 100),
]


class Command(BaseCommand):
    help = "Seed a demo catalog (idempotent; existing slugs are left untouched)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset-stock",
            action="store_true",
            help="Reset stock of existing demo products to the seed value.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding catalog..."))

        created_count = 0
        for slug, name, price, discount, stock in SAMPLE_PRODUCTS:
            product, created = Product.objects.get_or_create(
                slug=slug,
                defaults={
                    "name": name,
                    "price": Decimal(price),
                    "discount_percent": Decimal(discount),
                    "stock": stock,
                },
            )
            if created:
                created_count += 1
            elif options["reset_stock"]:
                Product.objects.filter(pk=product.pk).update(stock=stock)

        self.stdout.write(
            self.style.SUCCESS(f"Catalog seeded ({created_count} new products).")
        )
