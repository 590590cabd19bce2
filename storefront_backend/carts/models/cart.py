"""
PATH: carts/models/cart.py

CART MODEL

Purpose:
- Server-side shopping cart of an authenticated customer (mutable).
- Exactly one cart per user; created lazily on first access.

Rules:
- The OneToOne user column is the uniqueness guarantee: concurrent
  first requests converge on one row via get_or_create().
- No money is stored here; the cart is priced live from the catalog.
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Sum

User = settings.AUTH_USER_MODEL


class Cart(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name="cart",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    @property
    def item_count(self) -> int:
        total = self.items.aggregate(total=Sum("quantity")).get("total")
        return int(total or 0)

    @property
    def is_empty(self) -> bool:
        return not self.items.exists()

    def __str__(self):
        return f"Cart {self.id} | {self.user}"
