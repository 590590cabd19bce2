# carts/services/cart_manager.py

"""
======================================================
PATH: carts/services/cart_manager.py
======================================================
CART MANAGER

Purpose:
- Per-user server-side cart: get / add / set quantity / remove / clear.
- Post-payment cart clearing for the payment reconciler.

Rules:
- Exactly one cart per user (OneToOne + get_or_create).
- One line per product; adding an existing product accumulates quantity
  with a database-side increment (no Python read-modify-write).
- No stock check here; stock is enforced when an order is created.
- Services raise core.exceptions errors; views never catch them.
"""

from __future__ import annotations

import logging
import uuid

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from carts.models import Cart, CartItem
from core.exceptions import InvalidInputError, NotFoundError
from products.models import Product

logger = logging.getLogger(__name__)

# Upper bound of the quantity column (PositiveIntegerField).
MAX_LINE_QUANTITY = 2_147_483_647


# =====================================================
# HELPERS
# =====================================================

def _to_int_qty(value) -> int:
    if isinstance(value, bool):
        raise InvalidInputError("quantity must be an integer")
    if isinstance(value, int):
        qty = value
    else:
        try:
            qty = int(str(value).strip())
        except (TypeError, ValueError):
            raise InvalidInputError("quantity must be an integer")

    if qty > MAX_LINE_QUANTITY:
        raise InvalidInputError(f"quantity must be at most {MAX_LINE_QUANTITY}")
    return qty


def _parse_product_id(product_id) -> uuid.UUID:
    if isinstance(product_id, uuid.UUID):
        return product_id
    try:
        return uuid.UUID(str(product_id))
    except (TypeError, ValueError, AttributeError):
        raise InvalidInputError("product_id must be a valid UUID")


def _require_product(product_id) -> Product:
    pid = _parse_product_id(product_id)
    product = Product.objects.filter(pk=pid, is_active=True).first()
    if product is None:
        raise NotFoundError(f"Product not found: {pid}")
    return product


def _existing_cart(user) -> Cart:
    cart = Cart.objects.filter(user=user).first()
    if cart is None:
        raise NotFoundError("Cart not found")
    return cart


def _touch(cart: Cart) -> None:
    Cart.objects.filter(pk=cart.pk).update(updated_at=timezone.now())


# =====================================================
# OPERATIONS
# =====================================================

def get_cart(user) -> Cart:
    """
    The user's cart, created empty on first access (idempotent).
    """
    cart, created = Cart.objects.get_or_create(user=user)
    if created:
        logger.info("Cart created", extra={"user_id": str(user.pk), "cart_id": str(cart.pk)})
    return cart


@transaction.atomic
def add_item(user, product_id, quantity=1) -> Cart:
    qty = _to_int_qty(quantity)
    if qty <= 0:
        raise InvalidInputError("quantity must be greater than zero")

    product = _require_product(product_id)
    cart = get_cart(user)

    item, created = CartItem.objects.get_or_create(
        cart=cart,
        product=product,
        defaults={"quantity": qty},
    )
    if not created:
        updated = CartItem.objects.filter(
            pk=item.pk,
            quantity__lte=MAX_LINE_QUANTITY - qty,
        ).update(
            quantity=F("quantity") + qty,
            updated_at=timezone.now(),
        )
        if updated != 1:
            raise InvalidInputError(
                f"quantity must be at most {MAX_LINE_QUANTITY}",
                details={"product_id": str(product.id), "requested": qty},
            )

    _touch(cart)
    return cart


@transaction.atomic
def set_quantity(user, product_id, quantity) -> Cart:
    """
    quantity <= 0 removes the line; otherwise the line is set to exactly
    `quantity` (created if missing).
    """
    qty = _to_int_qty(quantity)
    pid = _parse_product_id(product_id)
    cart = _existing_cart(user)

    if qty <= 0:
        CartItem.objects.filter(cart=cart, product_id=pid).delete()
    else:
        product = _require_product(pid)
        CartItem.objects.update_or_create(
            cart=cart,
            product=product,
            defaults={"quantity": qty},
        )

    _touch(cart)
    return cart


@transaction.atomic
def remove_item(user, product_id) -> Cart:
    pid = _parse_product_id(product_id)
    cart = _existing_cart(user)

    CartItem.objects.filter(cart=cart, product_id=pid).delete()

    _touch(cart)
    return cart


@transaction.atomic
def clear(user) -> Cart | None:
    cart = Cart.objects.filter(user=user).first()
    if cart is None:
        return None

    cart.items.all().delete()
    _touch(cart)
    return cart


def clear_for_user_id(user_id) -> int:
    """
    Empty a user's cart by id. Runs inside the caller's transaction when
    there is one (payment reconciliation).
    """
    deleted, _ = CartItem.objects.filter(cart__user_id=user_id).delete()
    if deleted:
        logger.info("Cart cleared", extra={"user_id": str(user_id), "lines": deleted})
    return deleted
