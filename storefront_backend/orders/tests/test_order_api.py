# orders/tests/test_order_api.py

import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from orders.models import Order
from products.models import Product

User = get_user_model()


class OrderAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="orders@example.com", password="pass12345")
        self.other = User.objects.create_user(email="other@example.com", password="pass12345")
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass12345", role="admin"
        )

        self.product = Product.objects.create(
            name="Headphones",
            slug="headphones",
            price=Decimal("100.00"),
            discount_percent=Decimal("10.00"),
            stock=5,
        )

        self.client.force_authenticate(user=self.user)
        self.list_url = reverse("orders:order-list")
        self.admin_url = reverse("orders:admin-order-list")

    def _create(self, quantity=2):
        return self.client.post(
            self.list_url,
            {
                "items": [{"product_id": str(self.product.id), "quantity": quantity}],
                "shipping_address": "1 Main St",
            },
            format="json",
        )

    def test_create_order(self):
        res = self._create()

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["status"], "PENDING")
        self.assertEqual(res.data["subtotal_amount"], "180.00")
        self.assertEqual(res.data["tax_amount"], "14.40")
        self.assertEqual(res.data["total_amount"], "194.40")
        self.assertEqual(res.data["items"][0]["price_at_purchase"], "90.00")

    def test_create_order_insufficient_stock_is_409(self):
        res = self._create(quantity=6)

        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STOCK")
        self.assertFalse(Order.objects.exists())

    def test_create_order_requires_items(self):
        res = self.client.post(self.list_url, {"items": []}, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")

    def test_create_order_requires_shipping_address(self):
        for body in (
            {"items": [{"product_id": str(self.product.id), "quantity": 1}]},
            {"items": [{"product_id": str(self.product.id), "quantity": 1}], "shipping_address": "  "},
        ):
            res = self.client.post(self.list_url, body, format="json")

            self.assertEqual(res.status_code, 400)
            self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")
            self.assertIn("shipping_address", res.data["error"]["details"])

        self.assertFalse(Order.objects.exists())
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 5)

    def test_create_order_unknown_product_is_404(self):
        res = self.client.post(
            self.list_url,
            {
                "items": [{"product_id": str(uuid.uuid4()), "quantity": 1}],
                "shipping_address": "1 Main St",
            },
            format="json",
        )

        self.assertEqual(res.status_code, 404)

    def test_list_only_own_orders(self):
        self._create(quantity=1)
        other_client = APIClient()
        other_client.force_authenticate(user=self.other)
        other_client.post(
            self.list_url,
            {
                "items": [{"product_id": str(self.product.id), "quantity": 1}],
                "shipping_address": "2 Side St",
            },
            format="json",
        )

        res = self.client.get(self.list_url)

        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 1)

    def test_detail_owner_admin_and_stranger(self):
        order_id = self._create().data["id"]
        url = reverse("orders:order-detail", kwargs={"order_id": order_id})

        self.assertEqual(self.client.get(url).status_code, 200)

        stranger = APIClient()
        stranger.force_authenticate(user=self.other)
        res = stranger.get(url)
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["error"]["code"], "FORBIDDEN")

        admin = APIClient()
        admin.force_authenticate(user=self.admin)
        self.assertEqual(admin.get(url).status_code, 200)

    def test_detail_missing_is_404(self):
        url = reverse("orders:order-detail", kwargs={"order_id": uuid.uuid4()})

        self.assertEqual(self.client.get(url).status_code, 404)

    def test_admin_list_requires_admin(self):
        res = self.client.get(self.admin_url)

        self.assertEqual(res.status_code, 403)

    def test_admin_list_filter_and_pagination(self):
        first = self._create(quantity=1).data["id"]
        self._create(quantity=1)
        Order.objects.filter(pk=first).update(status=Order.STATUS_PROCESSING)

        admin = APIClient()
        admin.force_authenticate(user=self.admin)

        res = admin.get(self.admin_url)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 2)

        res = admin.get(self.admin_url, {"status": "PROCESSING"})
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(str(res.data["results"][0]["id"]), first)

        res = admin.get(self.admin_url, {"limit": 1, "offset": 1})
        self.assertEqual(len(res.data["results"]), 1)

    def test_status_patch(self):
        order_id = self._create().data["id"]
        url = reverse("orders:order-status", kwargs={"order_id": order_id})

        self.assertEqual(self.client.patch(url, {"status": "PROCESSING"}, format="json").status_code, 403)

        admin = APIClient()
        admin.force_authenticate(user=self.admin)

        res = admin.patch(url, {"status": "DELIVERED"}, format="json")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "INVALID_TRANSITION")

        res = admin.patch(url, {"status": "PROCESSING"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "PROCESSING")

        res = admin.patch(url, {"status": "BOGUS"}, format="json")
        self.assertEqual(res.status_code, 400)
