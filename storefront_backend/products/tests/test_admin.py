# products/tests/test_admin.py

from decimal import Decimal
from types import SimpleNamespace

from django.contrib.admin.sites import AdminSite
from django.test import RequestFactory, TestCase

from products.admin import ProductAdmin
from products.models import Product
from products.services.inventory import decrement_stock_if_sufficient


class ProductAdminStockTests(TestCase):
    """
    GUARANTEES:
    - Editing a product never overwrites stock reserved by checkouts
    - Restocking adds units on top of the current database value
    """

    def setUp(self):
        self.product = Product.objects.create(
            name="Backpack",
            slug="backpack",
            price=Decimal("100.00"),
            stock=5,
        )
        self.model_admin = ProductAdmin(Product, AdminSite())
        self.request = RequestFactory().post("/")

    def test_price_edit_keeps_stock_reserved_after_form_opened(self):
        stale = Product.objects.get(pk=self.product.pk)

        self.assertTrue(decrement_stock_if_sufficient(self.product.pk, 2))

        stale.price = Decimal("120.00")
        self.model_admin.save_model(self.request, stale, form=None, change=True)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 3)
        self.assertEqual(self.product.price, Decimal("120.00"))
        self.assertEqual(stale.stock, 3)

    def test_restock_adds_to_current_stock(self):
        stale = Product.objects.get(pk=self.product.pk)
        decrement_stock_if_sufficient(self.product.pk, 2)

        form = SimpleNamespace(cleaned_data={"restock_units": 4})
        self.model_admin.save_model(self.request, stale, form=form, change=True)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 7)

    def test_stock_read_only_only_when_editing(self):
        self.assertNotIn("stock", self.model_admin.get_readonly_fields(self.request))
        self.assertIn(
            "stock", self.model_admin.get_readonly_fields(self.request, self.product)
        )

    def test_create_saves_initial_stock(self):
        product = Product(name="Cap", slug="cap", price=Decimal("15.00"), stock=12)

        self.model_admin.save_model(self.request, product, form=None, change=False)

        self.assertEqual(Product.objects.get(slug="cap").stock, 12)
