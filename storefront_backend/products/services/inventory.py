# products/services/inventory.py

"""
======================================================
PATH: products/services/inventory.py
======================================================
CATALOG STOCK SERVICES

Purpose:
- Read-only product snapshots for pricing (cart + order builder).
- The one sanctioned way to reserve stock: a conditional decrement
  executed by the database, not a Python read-then-write.
- Stock release for cancelled orders.

Rules:
- Quantities are integer units > 0.
- decrement_stock_if_sufficient() must run inside the caller's
  transaction.atomic() so a later failure rolls every decrement back.
- Inactive products are invisible to the storefront (snapshot is None).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import F

from products.models import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductSnapshot:
    id: object
    name: str
    price: Decimal
    discount_percent: Decimal
    stock: int

    @classmethod
    def from_product(cls, product: Product) -> "ProductSnapshot":
        return cls(
            id=product.id,
            name=product.name,
            price=Decimal(product.price),
            discount_percent=Decimal(product.discount_percent or "0.00"),
            stock=int(product.stock),
        )


def _to_positive_int(value, *, field_name="amount") -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if n <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return n


def get_product_snapshot(product_id) -> ProductSnapshot | None:
    """
    Current price / discount / stock for an active product, or None.

    A malformed id behaves like an unknown one.
    """
    try:
        product = Product.objects.filter(pk=product_id, is_active=True).first()
    except (ValidationError, ValueError):
        return None

    if product is None:
        return None
    return ProductSnapshot.from_product(product)


def decrement_stock_if_sufficient(product_id, amount) -> bool:
    """
    Atomically reserve `amount` units.

    Equivalent to:
        UPDATE product SET stock = stock - amount
        WHERE id = :id AND stock >= amount

    Returns True only when exactly one row was updated. Two concurrent
    callers can never both succeed past the available stock: the row lock
    taken by the UPDATE serialises them and the WHERE clause is
    re-evaluated against the committed value.
    """
    qty = _to_positive_int(amount)

    updated = Product.objects.filter(pk=product_id, stock__gte=qty).update(
        stock=F("stock") - qty
    )

    if updated != 1:
        logger.info(
            "Stock decrement refused",
            extra={"product_id": str(product_id), "amount": qty},
        )
        return False

    return True


def restore_stock(product_id, amount) -> None:
    """
    Release `amount` previously reserved units back to the catalog
    (order cancellation).
    """
    qty = _to_positive_int(amount)

    Product.objects.filter(pk=product_id).update(stock=F("stock") + qty)
