# orders/tests/test_order_lifecycle.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from core.exceptions import InvalidInputError, InvalidTransitionError, NotFoundError
from orders.models import Order
from orders.services.order_builder import create_order
from orders.services.order_lifecycle import can_transition, mark_order_paid, transition_order
from products.models import Product

User = get_user_model()


class TransitionTableTests(TestCase):
    def test_forward_path(self):
        self.assertTrue(can_transition(from_status="PENDING", to_status="PROCESSING"))
        self.assertTrue(can_transition(from_status="PROCESSING", to_status="SHIPPED"))
        self.assertTrue(can_transition(from_status="SHIPPED", to_status="DELIVERED"))

    def test_illegal_jumps(self):
        self.assertFalse(can_transition(from_status="PENDING", to_status="DELIVERED"))
        self.assertFalse(can_transition(from_status="SHIPPED", to_status="PENDING"))
        self.assertFalse(can_transition(from_status="DELIVERED", to_status="CANCELLED"))
        self.assertFalse(can_transition(from_status="CANCELLED", to_status="PENDING"))

    def test_cancel_from_every_non_terminal_state(self):
        for status in ("PENDING", "PROCESSING", "SHIPPED"):
            self.assertTrue(can_transition(from_status=status, to_status="CANCELLED"))


class OrderLifecycleTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="life@example.com", password="pass12345")
        self.product = Product.objects.create(
            name="Sweatshirt", slug="sweatshirt", price=Decimal("59.99"), stock=10
        )
        self.order = create_order(user=self.user, lines=[{"product_id": self.product.id, "quantity": 3}])

    def test_walks_forward(self):
        for status in ("PROCESSING", "SHIPPED", "DELIVERED"):
            order = transition_order(self.order.id, status)
            self.assertEqual(order.status, status)

    def test_same_status_is_noop(self):
        order = transition_order(self.order.id, "PENDING")

        self.assertEqual(order.status, Order.STATUS_PENDING)

    def test_illegal_jump_raises(self):
        with self.assertRaises(InvalidTransitionError):
            transition_order(self.order.id, "DELIVERED")

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)

    def test_unknown_status_and_order(self):
        with self.assertRaises(InvalidInputError):
            transition_order(self.order.id, "LOST")
        with self.assertRaises(NotFoundError):
            transition_order("00000000-0000-0000-0000-000000000000", "SHIPPED")

    def test_cancel_releases_stock(self):
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 7)

        transition_order(self.order.id, "CANCELLED")

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 10)

        # terminal: a second cancel is a no-op, not a second restock
        transition_order(self.order.id, "CANCELLED")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 10)

    def test_mark_order_paid(self):
        self.assertTrue(mark_order_paid(self.order))
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PROCESSING)
        self.assertIsNotNone(self.order.paid_at)

        self.assertFalse(mark_order_paid(self.order))

    def test_cancelled_order_cannot_be_paid(self):
        order = transition_order(self.order.id, "CANCELLED")

        with self.assertRaises(InvalidTransitionError):
            mark_order_paid(order)
