"""
PATH: carts/urls.py

CART URLS

Cart lines are addressed by product id.
"""

from django.urls import path

from carts.views import CartItemView, CartView

app_name = "carts"

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("<uuid:product_id>/", CartItemView.as_view(), name="cart-item"),
]
