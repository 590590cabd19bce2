from .order import (
    CreateOrderInputSerializer,
    OrderItemSerializer,
    OrderSerializer,
    UpdateOrderStatusInputSerializer,
)

__all__ = [
    "OrderSerializer",
    "OrderItemSerializer",
    "CreateOrderInputSerializer",
    "UpdateOrderStatusInputSerializer",
]
