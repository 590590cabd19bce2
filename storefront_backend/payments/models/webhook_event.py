# payments/models/webhook_event.py

from django.db import models


class WebhookEvent(models.Model):
    """
    Processed payment-processor webhook event.

    Key rule:
    - event_id is unique: the processor delivers at-least-once, and a
      second delivery of the same event must be acknowledged without
      re-applying its effects
    - The row is written in the same transaction as the order update it
      caused, so "recorded" always means "applied"
    """

    OUTCOME_APPLIED = "applied"
    OUTCOME_ALREADY_PAID = "already_paid"
    OUTCOME_AMOUNT_MISMATCH = "amount_mismatch"
    OUTCOME_ORDER_CANCELLED = "order_cancelled"
    OUTCOME_ORDER_MISSING = "order_missing"
    OUTCOME_PAYMENT_FAILED = "payment_failed"
    OUTCOME_IGNORED = "ignored"

    OUTCOME_CHOICES = [
        (OUTCOME_APPLIED, "Applied"),
        (OUTCOME_ALREADY_PAID, "Already paid"),
        (OUTCOME_AMOUNT_MISMATCH, "Amount mismatch"),
        (OUTCOME_ORDER_CANCELLED, "Order cancelled"),
        (OUTCOME_ORDER_MISSING, "Order missing"),
        (OUTCOME_PAYMENT_FAILED, "Payment failed"),
        (OUTCOME_IGNORED, "Ignored"),
    ]

    event_id = models.CharField(max_length=255, unique=True)
    event_type = models.CharField(max_length=120, db_index=True)

    payment_intent_id = models.CharField(max_length=255, blank=True, default="", db_index=True)

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="webhook_events",
    )

    outcome = models.CharField(max_length=32, choices=OUTCOME_CHOICES, default=OUTCOME_IGNORED)

    payload = models.JSONField(default=dict, blank=True)

    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-received_at"]

    def __str__(self):
        return f"{self.event_type} | {self.event_id} | {self.outcome}"
