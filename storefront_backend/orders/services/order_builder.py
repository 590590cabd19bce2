# orders/services/order_builder.py

"""
ORDER BUILDER (APPLICATION SERVICE)

Purpose:
- Turn requested lines into an immutable, priced PENDING order.
- Reserve stock for every line in the same transaction.

Hard rules:
- Quantities are integer units >= 1; duplicate product lines are merged.
- Money is computed server-side from a catalog snapshot; the client
  never supplies prices or totals.
- Order rows + item rows + stock decrements succeed together or roll
  back together. Stock is decremented with a conditional UPDATE in
  product-id order (stable lock order, no deadlocks between checkouts).
"""

from __future__ import annotations

import logging
import uuid

from django.db import transaction

from core.exceptions import InsufficientStockError, InvalidInputError, NotFoundError
from orders.models import Order, OrderItem
from orders.services.pricing import price_cart
from products.services.inventory import decrement_stock_if_sufficient, get_product_snapshot

logger = logging.getLogger(__name__)


def _to_int_qty(value) -> int:
    if isinstance(value, bool):
        raise InvalidInputError("quantity must be a whole integer unit")

    if isinstance(value, int):
        qty = value
    elif isinstance(value, str) and value.strip().isdigit():
        qty = int(value.strip())
    else:
        raise InvalidInputError("quantity must be a whole integer unit")

    if qty < 1:
        raise InvalidInputError("quantity must be at least 1")
    return qty


def _normalize_lines(lines) -> list[tuple[uuid.UUID, int]]:
    """
    [{product_id, quantity}, ...] -> [(product_id, merged quantity), ...]
    sorted by product id.
    """
    if not lines:
        raise InvalidInputError("Order must contain at least one item")

    merged: dict[uuid.UUID, int] = {}
    for idx, line in enumerate(lines):
        if not isinstance(line, dict):
            raise InvalidInputError(f"items[{idx}] must be an object")

        try:
            pid = uuid.UUID(str(line.get("product_id")))
        except (TypeError, ValueError):
            raise InvalidInputError(f"items[{idx}].product_id must be a valid UUID")

        merged[pid] = merged.get(pid, 0) + _to_int_qty(line.get("quantity"))

    return sorted(merged.items(), key=lambda kv: str(kv[0]))


def _snapshot_lines(normalized):
    snapshots = []
    for pid, qty in normalized:
        snap = get_product_snapshot(pid)
        if snap is None:
            raise NotFoundError(f"Product not found: {pid}")
        if snap.stock < qty:
            raise InsufficientStockError(
                f"Insufficient stock for {snap.name}",
                details={"product_id": str(pid), "requested": qty, "available": snap.stock},
            )
        snapshots.append((snap, qty))
    return snapshots


def create_order(*, user, lines, shipping_address: str = "") -> Order:
    """
    Build a PENDING order from requested lines.

    Raises:
    - InvalidInputError: empty / malformed lines
    - NotFoundError: unknown or inactive product
    - InsufficientStockError: stock short at snapshot time, or lost to a
      concurrent checkout at decrement time (nothing is persisted)
    """
    normalized = _normalize_lines(lines)
    snapshots = _snapshot_lines(normalized)
    totals = price_cart(snapshots)

    with transaction.atomic():
        order = Order.objects.create(
            user=user,
            subtotal_amount=totals.subtotal,
            tax_amount=totals.tax,
            discount_amount=totals.discount,
            total_amount=totals.total,
            status=Order.STATUS_PENDING,
            shipping_address=(shipping_address or "").strip(),
        )

        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price_at_purchase=line.unit_price,
                    line_total=line.line_total,
                )
                for line in totals.lines
            ]
        )

        for line in totals.lines:
            if not decrement_stock_if_sufficient(line.product_id, line.quantity):
                logger.warning(
                    "Checkout lost stock race",
                    extra={"product_id": str(line.product_id), "quantity": line.quantity},
                )
                # raising inside atomic() rolls back the order and earlier decrements
                raise InsufficientStockError(
                    f"Insufficient stock for {line.name}",
                    details={"product_id": str(line.product_id), "requested": line.quantity},
                )

    logger.info(
        "Order created",
        extra={
            "order_id": str(order.id),
            "order_no": order.order_no,
            "user_id": str(user.pk),
            "total": str(order.total_amount),
        },
    )
    return order
