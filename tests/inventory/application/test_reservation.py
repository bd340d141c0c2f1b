"""Tests for inventory reservation — all-or-nothing decrement and release."""

import pytest
from inventory.reservation import OrderLineRequest, release, reserve
from protean.exceptions import ValidationError
from shared.errors import InsufficientStock, ProductNotFound


class TestReserve:
    def test_decrements_every_line(self, add_product, store):
        add_product("p1", stock=5)
        add_product("p2", stock=3)

        reserve([OrderLineRequest("p1", 2), OrderLineRequest("p2", 3)])

        assert store.get_product("p1").stock == 3
        assert store.get_product("p2").stock == 0

    def test_returns_lines_in_request_order(self, add_product):
        add_product("z-last", price=700)
        add_product("a-first", price=300)

        reserved = reserve([OrderLineRequest("z-last", 1, size="L"), OrderLineRequest("a-first", 2)])

        assert [line.product_id for line in reserved] == ["z-last", "a-first"]
        assert [line.unit_price for line in reserved] == [700, 300]
        assert reserved[0].size == "L"

    def test_captures_price_at_reservation(self, add_product, store):
        add_product("p1", price=1000)
        reserved = reserve([OrderLineRequest("p1", 1)])
        store.set_price("p1", 5000)
        assert reserved[0].unit_price == 1000

    def test_exact_stock_is_enough(self, add_product, store):
        add_product("p1", stock=2)
        reserve([OrderLineRequest("p1", 2)])
        assert store.get_product("p1").stock == 0


class TestReserveFailures:
    def test_insufficient_stock(self, add_product):
        add_product("p1", stock=1)
        with pytest.raises(InsufficientStock) as exc_info:
            reserve([OrderLineRequest("p1", 2)])
        assert exc_info.value.product_id == "p1"
        assert exc_info.value.available == 1

    def test_multi_line_failure_changes_nothing(self, add_product, store):
        add_product("p1", stock=5)
        add_product("p2", stock=5)
        add_product("p3", stock=1)

        with pytest.raises(InsufficientStock):
            reserve([OrderLineRequest("p1", 2), OrderLineRequest("p2", 2), OrderLineRequest("p3", 2)])

        assert store.get_product("p1").stock == 5
        assert store.get_product("p2").stock == 5
        assert store.get_product("p3").stock == 1

    def test_unknown_product(self, add_product, store):
        add_product("p1", stock=5)
        with pytest.raises(ProductNotFound):
            reserve([OrderLineRequest("p1", 1), OrderLineRequest("missing", 1)])
        assert store.get_product("p1").stock == 5

    def test_inactive_product_is_not_found(self, add_product):
        add_product("p1", stock=5, is_active=False)
        with pytest.raises(ProductNotFound):
            reserve([OrderLineRequest("p1", 1)])

    def test_product_withdrawn_after_listing(self, add_product, store):
        add_product("p1", stock=5)
        store.set_active("p1", False)

        with pytest.raises(ProductNotFound):
            reserve([OrderLineRequest("p1", 1)])
        assert store.get_product("p1").stock == 5

        store.set_active("p1", True)
        assert reserve([OrderLineRequest("p1", 1)])[0].quantity == 1

    def test_empty_order(self):
        with pytest.raises(ValidationError):
            reserve([])

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity(self, add_product, store, quantity):
        add_product("p1", stock=5)
        with pytest.raises(ValidationError):
            reserve([OrderLineRequest("p1", quantity)])
        assert store.get_product("p1").stock == 5

    def test_same_product_on_two_lines_counts_both(self, add_product, store):
        add_product("p1", stock=3)
        with pytest.raises(InsufficientStock):
            reserve([OrderLineRequest("p1", 2, size="M"), OrderLineRequest("p1", 2, size="L")])
        assert store.get_product("p1").stock == 3


class TestRelease:
    def test_release_restores_stock(self, add_product, store):
        add_product("p1", stock=5)
        add_product("p2", stock=5)
        reserved = reserve([OrderLineRequest("p1", 2), OrderLineRequest("p2", 1)])

        release(reserved)

        assert store.get_product("p1").stock == 5
        assert store.get_product("p2").stock == 5

    def test_release_nothing(self):
        release([])
