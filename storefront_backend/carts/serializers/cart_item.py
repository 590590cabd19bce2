"""
PATH: carts/serializers/cart_item.py

CART ITEM SERIALIZER

Read-only line shape. Prices are live catalog prices (discount applied),
returned as strings to avoid float serialization issues.
"""

from rest_framework import serializers

from carts.models import CartItem
from orders.services.pricing import discounted_unit_price, line_total


class CartItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(source="product.id", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    product_slug = serializers.CharField(source="product.slug", read_only=True)
    list_price = serializers.DecimalField(
        source="product.price", max_digits=10, decimal_places=2, read_only=True
    )
    discount_percent = serializers.DecimalField(
        source="product.discount_percent", max_digits=5, decimal_places=2, read_only=True
    )

    unit_price = serializers.SerializerMethodField()
    line_total = serializers.SerializerMethodField()

    class Meta:
        model = CartItem
        fields = [
            "product_id",
            "product_name",
            "product_slug",
            "list_price",
            "discount_percent",
            "unit_price",
            "quantity",
            "line_total",
        ]
        read_only_fields = fields

    def get_unit_price(self, obj) -> str:
        return f"{discounted_unit_price(obj.product):.2f}"

    def get_line_total(self, obj) -> str:
        return f"{line_total(obj.product, obj.quantity):.2f}"
