"""
PATH: orders/urls.py

ORDER URLS

`admin/all/` is declared before `<uuid:order_id>/` routes.
"""

from django.urls import path

from orders.views import (
    AdminOrderListView,
    OrderDetailView,
    OrderListCreateView,
    OrderStatusView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderListCreateView.as_view(), name="order-list"),
    path("admin/all/", AdminOrderListView.as_view(), name="admin-order-list"),
    path("<uuid:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<uuid:order_id>/status/", OrderStatusView.as_view(), name="order-status"),
]
