from .inventory import (
    ProductSnapshot,
    decrement_stock_if_sufficient,
    get_product_snapshot,
    restore_stock,
)

__all__ = [
    "ProductSnapshot",
    "get_product_snapshot",
    "decrement_stock_if_sufficient",
    "restore_stock",
]
