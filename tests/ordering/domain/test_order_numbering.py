"""Tests for order number generation."""

import re

from ordering.order.numbering import generate_order_number

_FORMAT = re.compile(r"^ORD-\d{13}-[0-9A-Z]{9}$")


def test_format():
    assert _FORMAT.match(generate_order_number())


def test_uses_given_timestamp():
    assert generate_order_number(now_ms=1700000000000).startswith("ORD-1700000000000-")


def test_ten_thousand_sequential_numbers_are_unique():
    numbers = {generate_order_number() for _ in range(10_000)}
    assert len(numbers) == 10_000


def test_same_millisecond_still_unique():
    numbers = {generate_order_number(now_ms=1700000000000) for _ in range(1_000)}
    assert len(numbers) == 1_000
