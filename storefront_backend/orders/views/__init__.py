from .order import (
    AdminOrderListView,
    OrderDetailView,
    OrderListCreateView,
    OrderStatusView,
)

__all__ = [
    "OrderListCreateView",
    "AdminOrderListView",
    "OrderDetailView",
    "OrderStatusView",
]
