# orders/tests/test_pricing.py

from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase, override_settings

from orders.services.pricing import (
    discounted_unit_price,
    line_total,
    price_cart,
    tax,
    to_minor_units,
)


def _product(price, discount="0", name="Item", pid="p1"):
    return SimpleNamespace(id=pid, name=name, price=Decimal(price), discount_percent=Decimal(discount))


class PricingTests(SimpleTestCase):
    def test_discounted_unit_price(self):
        self.assertEqual(discounted_unit_price(_product("100.00", "10")), Decimal("90.00"))
        self.assertEqual(discounted_unit_price(_product("29.99", "15")), Decimal("25.49"))
        self.assertEqual(discounted_unit_price(_product("49.99")), Decimal("49.99"))

    def test_line_total_rounds_at_line_level(self):
        # 0.045 * 3 = 0.135 -> 0.14 (unit-first rounding would give 0.15)
        self.assertEqual(line_total(_product("0.05", "10"), 3), Decimal("0.14"))

    def test_reference_order_totals(self):
        totals = price_cart([(_product("100.00", "10"), 2)])

        self.assertEqual(totals.lines[0].unit_price, Decimal("90.00"))
        self.assertEqual(totals.subtotal, Decimal("180.00"))
        self.assertEqual(totals.tax, Decimal("14.40"))
        self.assertEqual(totals.discount, Decimal("0.00"))
        self.assertEqual(totals.total, Decimal("194.40"))

    def test_subtotal_is_sum_of_line_totals(self):
        totals = price_cart(
            [
                (_product("0.05", "10", pid="a"), 3),
                (_product("19.99", "0", pid="b"), 1),
            ]
        )

        self.assertEqual(totals.subtotal, sum(l.line_total for l in totals.lines))
        self.assertEqual(totals.total, totals.subtotal + totals.tax - totals.discount)

    def test_empty_cart(self):
        totals = price_cart([])

        self.assertEqual(totals.subtotal, Decimal("0.00"))
        self.assertEqual(totals.total, Decimal("0.00"))

    def test_tax_half_up(self):
        # 0.0625 * 0.08 = 0.005 -> 0.01
        self.assertEqual(tax(Decimal("0.0625"), "0.08"), Decimal("0.01"))

    @override_settings(ORDER_TAX_RATE="0.20")
    def test_tax_rate_from_settings(self):
        self.assertEqual(tax(Decimal("10.00")), Decimal("2.00"))

    def test_to_minor_units(self):
        self.assertEqual(to_minor_units(Decimal("194.40")), 19440)
        self.assertEqual(to_minor_units(Decimal("0.005")), 1)
        self.assertEqual(to_minor_units("12.34"), 1234)
