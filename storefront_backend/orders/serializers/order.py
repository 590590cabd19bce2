# orders/serializers/order.py

"""
ORDER SERIALIZERS

Read side:
- Orders are returned with their frozen lines; all money is a decimal
  string (DRF DecimalField).

Write side:
- Clients send product ids + quantities only; prices never come
  from the client.
"""

from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(source="product.id", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "product_id",
            "product_name",
            "quantity",
            "price_at_purchase",
            "line_total",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(source="user.id", read_only=True)
    user_email = serializers.EmailField(source="user.email", read_only=True)

    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_no",
            "user_id",
            "user_email",
            "status",
            "items",
            "subtotal_amount",
            "tax_amount",
            "discount_amount",
            "total_amount",
            "payment_intent_id",
            "shipping_address",
            "paid_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# =====================================================
# INPUT SERIALIZERS
# =====================================================

class OrderLineInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class CreateOrderInputSerializer(serializers.Serializer):
    items = OrderLineInputSerializer(many=True, allow_empty=False)
    shipping_address = serializers.CharField(required=True, allow_blank=False, max_length=500)


class UpdateOrderStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
