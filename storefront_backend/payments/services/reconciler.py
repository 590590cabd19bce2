# payments/services/reconciler.py

"""
======================================================
PATH: payments/services/reconciler.py
======================================================
PAYMENT RECONCILER

Purpose:
- Create (or reuse) the processor payment intent for an order.
- Apply verified processor webhooks onto order + cart state.
- Report payment status for an order.

Hard rules:
- Webhooks are authenticated by signature over the RAW body before any
  parsing or state change.
- Delivery is at-least-once: the event id is recorded (unique) in the
  same transaction as its effects, so a replay is a no-op.
- Only a PENDING order whose total matches the paid amount moves to
  PROCESSING; the owner's cart is cleared only when that move happens.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass

from django.db import IntegrityError, transaction

from carts.services.cart_manager import clear_for_user_id
from core.exceptions import (
    ForbiddenError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
)
from orders.models import Order
from orders.services.order_lifecycle import mark_order_paid
from orders.services.pricing import to_minor_units
from payments.gateway import get_gateway, payments_config
from payments.models import WebhookEvent
from payments.services.signatures import DEFAULT_TOLERANCE_SECONDS, verify_signature

logger = logging.getLogger(__name__)

EVENT_PAYMENT_SUCCEEDED = "payment_intent.succeeded"
EVENT_PAYMENT_FAILED = "payment_intent.payment_failed"

STATUS_NOT_STARTED = "not_started"


@dataclass(frozen=True)
class WebhookResult:
    event_id: str
    event_type: str
    outcome: str
    order_id: str | None = None
    duplicate: bool = False


# =====================================================
# HELPERS
# =====================================================

def _stripe_cfg() -> dict:
    cfg = payments_config().get("STRIPE") or {}
    return cfg if isinstance(cfg, dict) else {}


def _currency() -> str:
    return str(payments_config().get("CURRENCY") or "usd").strip().lower()


def _parse_uuid(value):
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def _load_owned_order(order_id, user, *, lock: bool = False) -> Order:
    pk = _parse_uuid(order_id)
    if pk is None:
        raise NotFoundError("Order not found")

    qs = Order.objects.select_for_update() if lock else Order.objects
    order = qs.filter(pk=pk).first()
    if order is None:
        raise NotFoundError("Order not found")
    if order.user_id != user.pk:
        raise ForbiddenError("Access denied")
    return order


# =====================================================
# PAYMENT INTENTS
# =====================================================

@transaction.atomic
def create_payment_intent(order_id, user) -> dict:
    """
    Idempotent: an order carries at most one intent. A second call returns
    the existing intent's client secret; the processor-side idempotency
    key covers a crash between "intent created" and "id saved".
    """
    order = _load_owned_order(order_id, user, lock=True)

    if order.status == Order.STATUS_CANCELLED:
        raise InvalidTransitionError(f"Order {order.order_no} is cancelled and cannot be paid")

    gateway = get_gateway()

    if order.payment_intent_id:
        intent = gateway.retrieve_intent(order.payment_intent_id)
        return {"client_secret": intent.client_secret, "payment_intent_id": intent.id}

    if order.status != Order.STATUS_PENDING:
        raise InvalidTransitionError(
            f"Order {order.order_no} is {order.status} and cannot start a payment"
        )

    # The order row stays locked for the processor round trip (bounded by the
    # gateway timeout); webhooks and admin transitions on this order wait.
    intent = gateway.create_intent(
        amount_minor=to_minor_units(order.total_amount),
        currency=_currency(),
        metadata={"order_id": str(order.id), "user_id": str(user.pk)},
        idempotency_key=f"order-{order.id}",
    )

    order.payment_intent_id = intent.id
    order.save(update_fields=["payment_intent_id", "updated_at"])

    logger.info(
        "Payment intent created",
        extra={"order_id": str(order.id), "payment_intent_id": intent.id},
    )
    return {"client_secret": intent.client_secret, "payment_intent_id": intent.id}


def get_payment_status(order_id, user) -> dict:
    order = _load_owned_order(order_id, user)

    if not order.payment_intent_id:
        return {
            "status": STATUS_NOT_STARTED,
            "order_id": str(order.id),
            "order_status": order.status,
        }

    intent = get_gateway().retrieve_intent(order.payment_intent_id)
    return {
        "status": intent.status,
        "order_id": str(order.id),
        "order_status": order.status,
    }


# =====================================================
# WEBHOOKS
# =====================================================

def _parse_event(raw_body: bytes) -> dict:
    try:
        event = json.loads((raw_body or b"").decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        raise InvalidInputError("Malformed webhook payload")

    if not isinstance(event, dict) or not event.get("id") or not event.get("type"):
        raise InvalidInputError("Webhook payload is missing id/type")
    return event


def _intent_from_event(event: dict) -> dict:
    obj = (event.get("data") or {}).get("object") or {}
    return obj if isinstance(obj, dict) else {}


def _find_order_for_intent(intent: dict, *, lock: bool) -> Order | None:
    qs = Order.objects.select_for_update() if lock else Order.objects
    metadata = intent.get("metadata") or {}

    pk = _parse_uuid(metadata.get("order_id"))
    if pk is not None:
        order = qs.filter(pk=pk).first()
        if order is not None:
            return order

    intent_id = str(intent.get("id") or "").strip()
    if intent_id:
        return qs.filter(payment_intent_id=intent_id).first()
    return None


def _paid_amount(intent: dict):
    raw = intent.get("amount_received")
    if raw in (None, "", 0):
        raw = intent.get("amount")
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _apply_payment_succeeded(intent: dict) -> tuple[str, Order | None]:
    intent_id = str(intent.get("id") or "")
    order = _find_order_for_intent(intent, lock=True)

    if order is None:
        logger.warning("Payment succeeded for unknown order", extra={"payment_intent_id": intent_id})
        return WebhookEvent.OUTCOME_ORDER_MISSING, None

    log_ctx = {"order_id": str(order.id), "payment_intent_id": intent_id}

    if order.status == Order.STATUS_CANCELLED:
        logger.error("Payment succeeded for cancelled order (needs refund)", extra=log_ctx)
        return WebhookEvent.OUTCOME_ORDER_CANCELLED, order

    if order.status != Order.STATUS_PENDING:
        logger.info("Order already paid; webhook ignored", extra=log_ctx)
        return WebhookEvent.OUTCOME_ALREADY_PAID, order

    expected = to_minor_units(order.total_amount)
    paid = _paid_amount(intent)
    currency = str(intent.get("currency") or "").lower()
    if paid != expected or (currency and currency != _currency()):
        logger.warning(
            "Amount mismatch on payment webhook",
            extra={**log_ctx, "expected": expected, "paid": paid, "currency": currency},
        )
        return WebhookEvent.OUTCOME_AMOUNT_MISMATCH, order

    if not order.payment_intent_id and intent_id:
        order.payment_intent_id = intent_id
        order.save(update_fields=["payment_intent_id", "updated_at"])

    if mark_order_paid(order):
        clear_for_user_id(order.user_id)

    return WebhookEvent.OUTCOME_APPLIED, order


def _apply_payment_failed(intent: dict) -> tuple[str, Order | None]:
    order = _find_order_for_intent(intent, lock=False)
    error = (intent.get("last_payment_error") or {}).get("message") or ""

    logger.warning(
        "Payment failed",
        extra={
            "order_id": str(order.id) if order else None,
            "payment_intent_id": str(intent.get("id") or ""),
            "reason": error,
        },
    )
    return WebhookEvent.OUTCOME_PAYMENT_FAILED, order


def handle_webhook(raw_body: bytes, signature_header: str | None) -> WebhookResult:
    """
    Raises:
    - SignatureInvalidError: missing header / secret, bad signature, stale
      timestamp (nothing is read or written)
    - InvalidInputError: signed but unparseable payload
    """
    cfg = _stripe_cfg()
    verify_signature(
        raw_body=raw_body,
        header=signature_header,
        secret=cfg.get("WEBHOOK_SECRET") or "",
        tolerance=int(cfg.get("WEBHOOK_TOLERANCE") or DEFAULT_TOLERANCE_SECONDS),
    )

    event = _parse_event(raw_body)
    event_id = str(event["id"])
    event_type = str(event["type"])
    intent = _intent_from_event(event)

    with transaction.atomic():
        try:
            with transaction.atomic():
                record = WebhookEvent.objects.create(
                    event_id=event_id,
                    event_type=event_type,
                    payment_intent_id=str(intent.get("id") or ""),
                    payload=event,
                )
        except IntegrityError:
            existing = WebhookEvent.objects.filter(event_id=event_id).first()
            logger.info("Duplicate webhook ignored", extra={"event_id": event_id})
            return WebhookResult(
                event_id=event_id,
                event_type=event_type,
                outcome=existing.outcome if existing else WebhookEvent.OUTCOME_IGNORED,
                order_id=str(existing.order_id) if existing and existing.order_id else None,
                duplicate=True,
            )

        if event_type == EVENT_PAYMENT_SUCCEEDED:
            outcome, order = _apply_payment_succeeded(intent)
        elif event_type == EVENT_PAYMENT_FAILED:
            outcome, order = _apply_payment_failed(intent)
        else:
            outcome, order = WebhookEvent.OUTCOME_IGNORED, None

        record.outcome = outcome
        record.order = order
        record.save(update_fields=["outcome", "order"])

    logger.info(
        "Webhook processed",
        extra={"event_id": event_id, "event_type": event_type, "outcome": outcome},
    )
    return WebhookResult(
        event_id=event_id,
        event_type=event_type,
        outcome=outcome,
        order_id=str(order.id) if order else None,
    )
