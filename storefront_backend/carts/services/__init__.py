from .cart_manager import (
    add_item,
    clear,
    clear_for_user_id,
    get_cart,
    remove_item,
    set_quantity,
)

__all__ = [
    "get_cart",
    "add_item",
    "set_quantity",
    "remove_item",
    "clear",
    "clear_for_user_id",
]
