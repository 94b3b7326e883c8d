"""Two customers racing for the same stock through real transactions."""

import threading

from storefront.application.add_order_item import AddOrderItemHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.domain.exceptions import InsufficientStockError
from storefront.domain.service.stock_ledger import StockLedger


def _race(new_uow, order_ids: list[int], product_id: int, quantity: int) -> list[str]:
    """Add one item per order concurrently; return each thread's outcome."""
    outcomes: list[str] = []
    lock = threading.Lock()
    start = threading.Barrier(len(order_ids))

    def buy(order_id: int) -> None:
        handler = AddOrderItemHandler(new_uow())  # one unit of work per request
        start.wait()
        try:
            handler.handle(order_id, product_id, quantity)
            result = "ok"
        except InsufficientStockError:
            result = "sold out"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=buy, args=(order_id,)) for order_id in order_ids]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return outcomes


def test_last_unit_goes_to_exactly_one_buyer(new_uow, add_product):
    product_id = add_product(units_in_stock=1)
    order_ids = [CreateOrderHandler(new_uow()).handle(user_id=u).id for u in (1, 2)]

    outcomes = _race(new_uow, order_ids, product_id, quantity=1)

    assert sorted(outcomes) == ["ok", "sold out"]
    with new_uow() as uow:
        assert StockLedger(uow).snapshot(product_id).units_in_stock == 0
        holders = [uow.orders.get_by_id(order_id).total_items for order_id in order_ids]
    assert sorted(holders) == [0, 1]


def test_many_buyers_never_overdraw(new_uow, add_product):
    product_id = add_product(units_in_stock=5)
    order_ids = [CreateOrderHandler(new_uow()).handle(user_id=u).id for u in range(8)]

    outcomes = _race(new_uow, order_ids, product_id, quantity=2)

    assert outcomes.count("ok") == 2
    assert outcomes.count("sold out") == 6
    with new_uow() as uow:
        assert StockLedger(uow).snapshot(product_id).units_in_stock == 1
