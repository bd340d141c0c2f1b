"""Concurrent reservations against the same rows must never oversell."""

import threading
from concurrent.futures import ThreadPoolExecutor

from inventory.reservation import OrderLineRequest, reserve
from shared.errors import InsufficientStock


def _race(workers, lines_for_worker):
    barrier = threading.Barrier(workers)

    def attempt(index):
        barrier.wait()
        try:
            reserve(lines_for_worker(index))
            return "ok"
        except InsufficientStock:
            return "insufficient"

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(attempt, range(workers)))


def test_last_unit_goes_to_exactly_one_order(add_product, store):
    add_product("p1", stock=1)

    results = _race(2, lambda _: [OrderLineRequest("p1", 1)])

    assert sorted(results) == ["insufficient", "ok"]
    assert store.get_product("p1").stock == 0


def test_many_buyers_never_drive_stock_negative(add_product, store):
    add_product("p1", stock=3)

    results = _race(8, lambda _: [OrderLineRequest("p1", 1)])

    assert results.count("ok") == 3
    assert results.count("insufficient") == 5
    assert store.get_product("p1").stock == 0


def test_crossed_multi_line_orders(add_product, store):
    add_product("p1", stock=1)
    add_product("p2", stock=1)

    # Opposite line order on each side; both want both products
    results = _race(
        2,
        lambda index: [OrderLineRequest("p1", 1), OrderLineRequest("p2", 1)]
        if index == 0
        else [OrderLineRequest("p2", 1), OrderLineRequest("p1", 1)],
    )

    assert sorted(results) == ["insufficient", "ok"]
    assert store.get_product("p1").stock == 0
    assert store.get_product("p2").stock == 0
