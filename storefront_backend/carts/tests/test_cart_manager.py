# carts/tests/test_cart_manager.py

import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from carts.models import Cart, CartItem
from carts.services import cart_manager
from core.exceptions import InvalidInputError, NotFoundError
from products.models import Product

User = get_user_model()


class CartManagerTests(TestCase):
    """
    GUARANTEES:
    - One cart per user, created lazily
    - Adding an existing product accumulates quantity on the same line
    - Quantity floor: a line never holds quantity <= 0
    """

    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass12345")
        self.product = Product.objects.create(
            name="Slim Fit Jeans",
            slug="slim-fit-jeans",
            price=Decimal("49.99"),
            stock=10,
        )

    def test_get_cart_is_idempotent(self):
        first = cart_manager.get_cart(self.user)
        second = cart_manager.get_cart(self.user)

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(Cart.objects.filter(user=self.user).count(), 1)

    def test_add_item_accumulates_quantity(self):
        cart_manager.add_item(self.user, self.product.id, 2)
        cart = cart_manager.add_item(self.user, self.product.id, 3)

        items = list(cart.items.all())
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].quantity, 5)

    def test_add_item_does_not_check_stock(self):
        cart = cart_manager.add_item(self.user, self.product.id, 50)

        self.assertEqual(cart.items.get().quantity, 50)

    def test_add_item_rejects_non_positive_quantity(self):
        for bad in (0, -1, "abc", True):
            with self.assertRaises(InvalidInputError):
                cart_manager.add_item(self.user, self.product.id, bad)

        self.assertFalse(CartItem.objects.exists())

    def test_add_item_rejects_quantity_beyond_column_range(self):
        with self.assertRaises(InvalidInputError):
            cart_manager.add_item(self.user, self.product.id, cart_manager.MAX_LINE_QUANTITY + 1)

        cart_manager.add_item(self.user, self.product.id, cart_manager.MAX_LINE_QUANTITY - 1)
        with self.assertRaises(InvalidInputError):
            cart_manager.add_item(self.user, self.product.id, 2)

        self.assertEqual(
            CartItem.objects.get().quantity, cart_manager.MAX_LINE_QUANTITY - 1
        )

    def test_add_item_unknown_or_inactive_product(self):
        with self.assertRaises(NotFoundError):
            cart_manager.add_item(self.user, uuid.uuid4(), 1)

        self.product.is_active = False
        self.product.save(update_fields=["is_active"])
        with self.assertRaises(NotFoundError):
            cart_manager.add_item(self.user, self.product.id, 1)

    def test_set_quantity_sets_and_creates(self):
        cart_manager.get_cart(self.user)

        cart = cart_manager.set_quantity(self.user, self.product.id, 4)
        self.assertEqual(cart.items.get().quantity, 4)

        cart = cart_manager.set_quantity(self.user, self.product.id, 1)
        self.assertEqual(cart.items.get().quantity, 1)

    def test_set_quantity_zero_or_negative_removes_line(self):
        cart_manager.add_item(self.user, self.product.id, 2)

        cart = cart_manager.set_quantity(self.user, self.product.id, 0)
        self.assertFalse(cart.items.exists())

        cart_manager.add_item(self.user, self.product.id, 2)
        cart = cart_manager.set_quantity(self.user, self.product.id, -3)
        self.assertFalse(cart.items.exists())

    def test_set_quantity_and_remove_without_cart(self):
        with self.assertRaises(NotFoundError):
            cart_manager.set_quantity(self.user, self.product.id, 1)
        with self.assertRaises(NotFoundError):
            cart_manager.remove_item(self.user, self.product.id)

    def test_add_then_remove_round_trip(self):
        cart_manager.add_item(self.user, self.product.id, 2)
        cart = cart_manager.remove_item(self.user, self.product.id)

        self.assertTrue(cart.is_empty)

    def test_remove_missing_line_is_noop(self):
        cart_manager.get_cart(self.user)

        cart = cart_manager.remove_item(self.user, uuid.uuid4())
        self.assertTrue(cart.is_empty)

    def test_clear(self):
        self.assertIsNone(cart_manager.clear(self.user))

        cart_manager.add_item(self.user, self.product.id, 2)
        cart = cart_manager.clear(self.user)

        self.assertTrue(cart.is_empty)

    def test_clear_for_user_id_only_touches_that_user(self):
        other = User.objects.create_user(email="other@example.com", password="pass12345")
        cart_manager.add_item(self.user, self.product.id, 1)
        cart_manager.add_item(other, self.product.id, 1)

        deleted = cart_manager.clear_for_user_id(self.user.id)

        self.assertEqual(deleted, 1)
        self.assertTrue(Cart.objects.get(user=self.user).is_empty)
        self.assertFalse(Cart.objects.get(user=other).is_empty)
