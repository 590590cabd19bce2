# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Product(models.Model):
    """
    Represents a sellable catalog product.

    STOCK MODEL (IMPORTANT):
    - Product stores its own available stock as a single integer
    - Stock is only ever changed through products.services.inventory
      (conditional decrement / restore), never by read-modify-write
    - The database refuses negative stock (CheckConstraint)

    PRICING:
    - price is the list price
    - discount_percent (0-100) is applied live in carts and frozen
      into OrderItem.price_at_purchase at order time
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")

    price = models.DecimalField(max_digits=10, decimal_places=2)
    discount_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Percent off the list price (e.g. 10.00).",
    )

    stock = models.IntegerField(default=0)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(stock__gte=0),
                name="product_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(price__gte=0),
                name="product_price_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(discount_percent__gte=0) & Q(discount_percent__lte=100),
                name="product_discount_percent_range",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.slug})"

    def clean(self):
        if self.price is None or Decimal(self.price) < Decimal("0.00"):
            raise ValidationError("Price cannot be negative")

        discount = Decimal(self.discount_percent or "0.00")
        if discount < Decimal("0.00") or discount > Decimal("100.00"):
            raise ValidationError("discount_percent must be between 0 and 100")

        if self.stock is None or int(self.stock) < 0:
            raise ValidationError("Stock cannot be negative")
