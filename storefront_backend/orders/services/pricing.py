# orders/services/pricing.py

"""
======================================================
PATH: orders/services/pricing.py
======================================================
PRICING ENGINE

Pure, deterministic money math shared by the cart view and the order
builder. No database access; callers pass anything exposing `.price`
and `.discount_percent` (Product or ProductSnapshot).

Rules:
- Decimal only; never float.
- Rounding is ROUND_HALF_UP to 2 dp.
- Line totals are rounded per line BEFORE summation, so
  subtotal == sum(stored line totals) always holds.
- tax = round(subtotal * ORDER_TAX_RATE)
- total = subtotal + tax - discount (discount reserved for promo codes)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

DEFAULT_TAX_RATE = Decimal("0.08")


def _money(value) -> Decimal:
    try:
        return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        raise ValueError(f"Invalid money value: {value!r}")


def get_tax_rate() -> Decimal:
    return Decimal(str(getattr(settings, "ORDER_TAX_RATE", DEFAULT_TAX_RATE)))


def _discount_factor(discount_percent) -> Decimal:
    discount = Decimal(str(discount_percent or "0"))
    return Decimal("1") - (discount / HUNDRED)


def discounted_unit_price(product) -> Decimal:
    return _money(Decimal(str(product.price)) * _discount_factor(product.discount_percent))


def line_total(product, quantity: int) -> Decimal:
    """
    Unrounded unit price times quantity, rounded once at the line level.

    0.05 @ 10% x 3 -> 0.045 * 3 = 0.135 -> 0.14
    (rounding the unit price first would give 0.05 * 3 = 0.15)
    """
    unit = Decimal(str(product.price)) * _discount_factor(product.discount_percent)
    return _money(unit * int(quantity))


def tax(subtotal, rate=None) -> Decimal:
    rate = get_tax_rate() if rate is None else Decimal(str(rate))
    return _money(Decimal(str(subtotal)) * rate)


def to_minor_units(amount) -> int:
    """Decimal currency amount -> integer cents (round half up)."""
    return int((Decimal(str(amount)) * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class PricedLine:
    product_id: object
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class OrderTotals:
    lines: tuple
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


def price_cart(lines, *, discount_amount=ZERO, tax_rate=None) -> OrderTotals:
    """
    Price an iterable of (product, quantity) pairs.
    """
    priced = tuple(
        PricedLine(
            product_id=product.id,
            name=product.name,
            quantity=int(quantity),
            unit_price=discounted_unit_price(product),
            line_total=line_total(product, quantity),
        )
        for product, quantity in lines
    )

    subtotal = _money(sum((p.line_total for p in priced), ZERO))
    tax_amount = tax(subtotal, tax_rate)
    discount = _money(discount_amount)

    return OrderTotals(
        lines=priced,
        subtotal=subtotal,
        tax=tax_amount,
        discount=discount,
        total=_money(subtotal + tax_amount - discount),
    )
