"""Tests for the pricing engine — shipping threshold, tax rounding, input checks."""

from dataclasses import dataclass
from decimal import Decimal

import pytest
from ordering.order.pricing import (
    FLAT_SHIPPING_FEE,
    FREE_SHIPPING_THRESHOLD,
    PriceBreakdown,
    price,
    tax_for,
)
from protean.exceptions import ValidationError


@dataclass
class Line:
    product_id: str
    unit_price: object
    quantity: object


class TestPrice:
    def test_two_products_above_threshold(self):
        breakdown = price([Line("A", 100000, 2), Line("B", 50000, 1)])
        assert breakdown == PriceBreakdown(subtotal=250000, shipping=0, tax=45000, total=295000)

    def test_total_is_sum_of_parts(self):
        breakdown = price([Line("A", 12345, 3), Line("B", 999, 7)])
        assert breakdown.total == breakdown.subtotal + breakdown.shipping + breakdown.tax

    def test_shipping_free_at_exact_threshold(self):
        breakdown = price([Line("A", FREE_SHIPPING_THRESHOLD, 1)])
        assert breakdown.shipping == 0

    def test_flat_fee_one_unit_below_threshold(self):
        breakdown = price([Line("A", FREE_SHIPPING_THRESHOLD - 1, 1)])
        assert breakdown.shipping == FLAT_SHIPPING_FEE
        assert breakdown.total == (FREE_SHIPPING_THRESHOLD - 1) + FLAT_SHIPPING_FEE + breakdown.tax

    def test_currency_defaults_to_inr(self):
        assert price([Line("A", 100, 1)]).currency == "INR"

    def test_to_dict(self):
        assert price([Line("A", 100000, 1)]).to_dict() == {
            "subtotal": 100000,
            "shipping": 0,
            "tax": 18000,
            "total": 118000,
            "currency": "INR",
        }

    def test_accepts_integral_decimal_price(self):
        assert price([Line("A", Decimal("2500"), 2)]).subtotal == 5000


class TestTaxRounding:
    def test_half_rounds_up(self):
        # 25 * 0.18 = 4.5
        assert tax_for(25) == 5

    def test_below_half_rounds_down(self):
        # 24 * 0.18 = 4.32
        assert tax_for(24) == 4

    def test_zero_subtotal(self):
        assert tax_for(0) == 0


class TestPriceValidation:
    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            price([Line("A", -1, 1)])
        assert "unit_price" in exc_info.value.messages

    def test_non_finite_price_rejected(self):
        with pytest.raises(ValidationError):
            price([Line("A", float("inf"), 1)])

    def test_nan_price_rejected(self):
        with pytest.raises(ValidationError):
            price([Line("A", float("nan"), 1)])

    def test_fractional_minor_units_rejected(self):
        with pytest.raises(ValidationError):
            price([Line("A", Decimal("10.5"), 1)])

    @pytest.mark.parametrize("quantity", [0, -3, 1.5, True])
    def test_bad_quantity_rejected(self, quantity):
        with pytest.raises(ValidationError) as exc_info:
            price([Line("A", 100, quantity)])
        assert "quantity" in exc_info.value.messages
