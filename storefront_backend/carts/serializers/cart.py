# carts/serializers/cart.py

"""
CART SERIALIZER

Purpose:
- Return the cart in a frontend-friendly shape.
- Totals are computed server-side with the pricing engine, never trusted
  from the client, and returned as decimal strings.
"""

from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from carts.models import Cart
from orders.services.pricing import price_cart

from .cart_item import CartItemSerializer


class CartSerializer(serializers.ModelSerializer):
    items = serializers.SerializerMethodField()

    item_count = serializers.SerializerMethodField()
    subtotal_amount = serializers.SerializerMethodField()
    tax_amount = serializers.SerializerMethodField()
    total_amount = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = [
            "id",
            "items",
            "item_count",
            "subtotal_amount",
            "tax_amount",
            "total_amount",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def to_representation(self, instance):
        # one query + one pricing pass per cart
        self._lines = list(instance.items.select_related("product").order_by("created_at"))
        self._totals = price_cart((i.product, i.quantity) for i in self._lines)
        return super().to_representation(instance)

    @extend_schema_field(CartItemSerializer(many=True))
    def get_items(self, obj):
        return CartItemSerializer(self._lines, many=True).data

    def get_item_count(self, obj) -> int:
        return sum(int(i.quantity) for i in self._lines)

    def get_subtotal_amount(self, obj) -> str:
        return f"{self._totals.subtotal:.2f}"

    def get_tax_amount(self, obj) -> str:
        return f"{self._totals.tax:.2f}"

    def get_total_amount(self, obj) -> str:
        return f"{self._totals.total:.2f}"
