"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed status transitions for Order
entities and applies them.

    PENDING -> PROCESSING -> SHIPPED -> DELIVERED
    any non-terminal state -> CANCELLED

Rules:
- Terminal: DELIVERED, CANCELLED
- A transition to the current status is an idempotent no-op
- Cancelling releases the order's reserved stock back to the catalog
- Every write happens on a row locked with select_for_update()
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from core.exceptions import InvalidInputError, InvalidTransitionError, NotFoundError
from orders.models import Order
from products.services.inventory import restore_stock

logger = logging.getLogger(__name__)


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_DELIVERED,
    Order.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_PROCESSING,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_PROCESSING: {
        Order.STATUS_SHIPPED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_SHIPPED: {
        Order.STATUS_DELIVERED,
        Order.STATUS_CANCELLED,
    },
}

VALID_STATUSES = {value for value, _ in Order.STATUS_CHOICES}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if target_status not in VALID_STATUSES:
        raise InvalidInputError(f"Unknown order status '{target_status}'")

    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidTransitionError(
            f"Order {order.order_no} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )


# ============================================================
# APPLICATION
# ============================================================


def _release_stock(order: Order) -> None:
    for item in order.items.order_by("product_id"):
        restore_stock(item.product_id, item.quantity)


def _apply(order: Order, target_status: str) -> None:
    previous = order.status
    order.status = target_status
    order.save(update_fields=["status", "updated_at"])

    if target_status == Order.STATUS_CANCELLED:
        _release_stock(order)

    logger.info(
        "Order status changed",
        extra={"order_id": str(order.id), "from": previous, "to": target_status},
    )


@transaction.atomic
def transition_order(order_id, target_status: str) -> Order:
    """
    Operator path (admin PATCH).
    """
    target_status = (target_status or "").strip().upper()

    order = Order.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise NotFoundError("Order not found")

    if order.status == target_status:
        return order

    validate_transition(order=order, target_status=target_status)
    _apply(order, target_status)
    return order


def mark_order_paid(order: Order) -> bool:
    """
    Payment path: PENDING -> PROCESSING and stamp paid_at.

    The caller must hold the row lock (select_for_update inside its
    transaction). Returns True only if this call moved the order; orders
    already PROCESSING or later are left untouched.
    """
    if order.status != Order.STATUS_PENDING:
        if order.status == Order.STATUS_CANCELLED:
            raise InvalidTransitionError(
                f"Order {order.order_no} is cancelled and cannot be paid"
            )
        return False

    order.status = Order.STATUS_PROCESSING
    order.paid_at = timezone.now()
    order.save(update_fields=["status", "paid_at", "updated_at"])

    logger.info(
        "Order marked paid",
        extra={"order_id": str(order.id), "payment_intent_id": order.payment_intent_id},
    )
    return True
