# products/tests/test_products.py

from decimal import Decimal

from django.core.management import call_command
from django.db import IntegrityError, transaction
from django.test import TestCase

from products.models import Product


class ProductModelTests(TestCase):
    """
    Product model tests.

    GUARANTEES:
    - Slug uniqueness is enforced
    - Stock can never be stored negative
    """

    def test_product_creation(self):
        product = Product.objects.create(
            name="Smart Watch Pro",
            slug="smart-watch-pro",
            price=Decimal("299.99"),
            stock=30,
        )

        self.assertEqual(product.discount_percent, Decimal("0.00"))
        self.assertTrue(product.is_active)
        self.assertIn("Smart Watch Pro", str(product))

    def test_slug_must_be_unique(self):
        Product.objects.create(name="Jeans", slug="jeans", price=Decimal("49.99"))

        with self.assertRaises(IntegrityError):
            Product.objects.create(name="Jeans 2", slug="jeans", price=Decimal("39.99"))

    def test_negative_stock_rejected_by_database(self):
        product = Product.objects.create(name="Tee", slug="tee", price=Decimal("29.99"), stock=1)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Product.objects.filter(pk=product.pk).update(stock=-1)


class SeedProductsCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command("seed_products", verbosity=0)
        first = Product.objects.count()

        call_command("seed_products", verbosity=0)

        self.assertGreater(first, 0)
        self.assertEqual(Product.objects.count(), first)
