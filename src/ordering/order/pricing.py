"""Pricing Engine — subtotal, shipping, tax and total for a set of lines.

All amounts are integer minor units (paise). Arithmetic runs on Decimal and
tax is rounded half-up back to a whole minor unit, so the same lines always
price the same way.

Policy:
    shipping is free from FREE_SHIPPING_THRESHOLD upwards (inclusive),
    FLAT_SHIPPING_FEE below it; tax is TAX_RATE of the subtotal.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from numbers import Integral

from protean.exceptions import ValidationError

CURRENCY = "INR"
FREE_SHIPPING_THRESHOLD = 50000  # ₹500.00
FLAT_SHIPPING_FEE = 5000  # ₹50.00
TAX_RATE = Decimal("0.18")


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: int
    shipping: int
    tax: int
    total: int
    currency: str = CURRENCY

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "shipping": self.shipping,
            "tax": self.tax,
            "total": self.total,
            "currency": self.currency,
        }


def _minor_units(value, product_id) -> int:
    """Coerce a unit price to whole minor units, rejecting anything unrepresentable."""
    if isinstance(value, bool):
        raise ValidationError({"unit_price": [f"Invalid price for product {product_id}"]})
    if isinstance(value, Integral):
        amount = int(value)
    elif isinstance(value, float | Decimal):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValidationError({"unit_price": [f"Price must be finite for product {product_id}"]})
        if isinstance(value, Decimal) and not value.is_finite():
            raise ValidationError({"unit_price": [f"Price must be finite for product {product_id}"]})
        if value != int(value):
            raise ValidationError(
                {"unit_price": [f"Price must be a whole number of minor units for product {product_id}"]}
            )
        amount = int(value)
    else:
        raise ValidationError({"unit_price": [f"Invalid price for product {product_id}"]})

    if amount < 0:
        raise ValidationError({"unit_price": [f"Price cannot be negative for product {product_id}"]})
    return amount


def shipping_for(subtotal: int) -> int:
    return 0 if subtotal >= FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE


def tax_for(subtotal: int) -> int:
    return int((Decimal(subtotal) * TAX_RATE).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def price(lines) -> PriceBreakdown:
    """Price lines exposing ``product_id``, ``unit_price`` and ``quantity``. Pure."""
    subtotal = 0
    for line in lines:
        product_id = getattr(line, "product_id", None)
        quantity = line.quantity
        if isinstance(quantity, bool) or not isinstance(quantity, Integral) or quantity < 1:
            raise ValidationError({"quantity": [f"Quantity must be a positive integer for product {product_id}"]})
        subtotal += _minor_units(line.unit_price, product_id) * int(quantity)

    shipping = shipping_for(subtotal)
    tax = tax_for(subtotal)
    return PriceBreakdown(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=subtotal + shipping + tax,
    )
