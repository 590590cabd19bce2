from .cart import CartItemView, CartView

__all__ = [
    "CartView",
    "CartItemView",
]
