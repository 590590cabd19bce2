from .cart import CartSerializer
from .cart_item import CartItemSerializer

__all__ = [
    "CartSerializer",
    "CartItemSerializer",
]
