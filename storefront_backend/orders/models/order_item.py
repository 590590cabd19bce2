# orders/models/order_item.py

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from products.models import Product


class OrderItem(models.Model):
    """
    Line items for Order. Immutable after creation.

    price_at_purchase is the discounted unit price captured when the
    order was placed; line_total is the line-level rounded total the
    order subtotal was summed from.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="order_items",
    )

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    price_at_purchase = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    line_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="round_half_up(unit price * quantity) (server computed)",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["order"], name="orders_orde_order_i_3c8d1b_idx"),
            models.Index(fields=["product"], name="orders_orde_product_7f2a9e_idx"),
        ]

    def __str__(self):
        return f"{self.product} x{self.quantity}"
