"""The use cases end to end against the SQLAlchemy adapter on SQLite."""

from decimal import Decimal

import pytest
from sqlalchemy import select

from storefront.application.add_order_item import AddOrderItemHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.delete_order import DeleteOrderHandler
from storefront.application.delete_order_item import DeleteOrderItemHandler
from storefront.application.dto import OrderItemSpec
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.modify_item_quantity import ModifyItemQuantityHandler
from storefront.application.product_quantities import ProductQuantitiesHandler
from storefront.application.show_order import ListOrderItemsHandler, ShowOrderHandler
from storefront.application.show_stock import ShowStockHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.exceptions import InsufficientStockError, InvalidStateError
from storefront.domain.model.order import OrderStatus
from storefront.domain.service.stock_ledger import StockLedger
from storefront.infrastructure.persistence.models import OrderItemRecord


def _stock(new_uow, product_id: int) -> int:
    with new_uow() as uow:
        return StockLedger(uow).snapshot(product_id).units_in_stock


class TestProductsAndStock:

    def test_product_round_trip(self, new_uow, add_product):
        product_id = add_product("Widget", units_in_stock=7, price="15.50")

        with new_uow() as uow:
            product = uow.products.get_by_id(product_id)

        assert product.name == "Widget"
        assert product.price.amount == Decimal("15.50")
        assert product.units_in_stock == 7
        assert product.version == 0

    def test_stale_version_write_is_refused(self, new_uow, add_product):
        product_id = add_product(units_in_stock=7)

        with new_uow() as uow:
            assert uow.products.compare_and_set_stock(product_id, 0, 6)
            assert not uow.products.compare_and_set_stock(product_id, 0, 5)
            uow.commit()

        with new_uow() as uow:
            product = uow.products.get_by_id(product_id)
        assert (product.units_in_stock, product.version) == (6, 1)

    def test_locked_read_sees_committed_stock(self, new_uow, add_product):
        product_id = add_product(units_in_stock=7)
        with new_uow() as uow:
            StockLedger(uow).reserve(product_id, 2)
            uow.commit()

        with new_uow() as uow:
            product = uow.products.get_by_id(product_id, lock=True)
        assert (product.units_in_stock, product.version) == (5, 1)

    def test_uncommitted_reservation_is_rolled_back(self, new_uow, add_product):
        product_id = add_product(units_in_stock=7)

        with new_uow() as uow:
            StockLedger(uow).reserve(product_id, 5)

        assert _stock(new_uow, product_id) == 7


class TestOrderLifecycle:

    def test_create_add_modify_delete_item(self, new_uow, add_product):
        product_id = add_product(units_in_stock=15)
        order = CreateOrderHandler(new_uow()).handle(
            user_id=7,
            delivery_price="4.99",
            first_item=OrderItemSpec(product_id=product_id, quantity=5),
        )
        item_id = order.items[0].id
        assert _stock(new_uow, product_id) == 10

        ModifyItemQuantityHandler(new_uow()).handle(item_id, 2)
        assert _stock(new_uow, product_id) == 13

        extra = AddOrderItemHandler(new_uow()).handle(order.id, product_id, 3)
        assert _stock(new_uow, product_id) == 10

        DeleteOrderItemHandler(new_uow()).handle(item_id)
        assert _stock(new_uow, product_id) == 12

        shown = ShowOrderHandler(new_uow()).handle(order.id)
        assert [i.id for i in shown.items] == [extra.id]
        assert shown.delivery_price == "$4.99"
        assert shown.total_items == 3

    def test_failed_add_leaves_no_item(self, new_uow, add_product, session_factory):
        product_id = add_product(units_in_stock=1)
        order_id = CreateOrderHandler(new_uow()).handle(user_id=7).id

        with pytest.raises(InsufficientStockError):
            AddOrderItemHandler(new_uow()).handle(order_id, product_id, 2)

        with session_factory() as session:
            assert session.scalars(select(OrderItemRecord)).all() == []
        assert _stock(new_uow, product_id) == 1

    def test_cancel_restores_stock(self, new_uow, add_product):
        a = add_product("A", units_in_stock=10)
        b = add_product("B", units_in_stock=10)
        order_id = CreateOrderHandler(new_uow()).handle(user_id=7).id
        AddOrderItemHandler(new_uow()).handle(order_id, a, 3)
        AddOrderItemHandler(new_uow()).handle(order_id, b, 2)

        dto = UpdateOrderStatusHandler(new_uow()).handle(order_id, OrderStatus.CANCELLED)

        assert dto.status == "CANCELLED"
        assert _stock(new_uow, a) == 10
        assert _stock(new_uow, b) == 10

    def test_shipped_items_are_frozen(self, new_uow, add_product):
        product_id = add_product(units_in_stock=10)
        order = CreateOrderHandler(new_uow()).handle(
            user_id=7, first_item=OrderItemSpec(product_id, 4)
        )
        UpdateOrderStatusHandler(new_uow()).handle(order.id, OrderStatus.SHIPPED)

        with pytest.raises(InvalidStateError):
            ModifyItemQuantityHandler(new_uow()).handle(order.items[0].id, 1)
        assert _stock(new_uow, product_id) == 6

    def test_delete_order_cascades_and_releases(self, new_uow, add_product, session_factory):
        a = add_product("A", units_in_stock=10)
        b = add_product("B", units_in_stock=10)
        order_id = CreateOrderHandler(new_uow()).handle(user_id=7).id
        AddOrderItemHandler(new_uow()).handle(order_id, a, 3)
        AddOrderItemHandler(new_uow()).handle(order_id, b, 2)

        DeleteOrderHandler(new_uow()).handle(order_id)

        with session_factory() as session:
            assert session.scalars(select(OrderItemRecord)).all() == []
        assert _stock(new_uow, a) == 10
        assert _stock(new_uow, b) == 10

    def test_delete_shipped_order_releases_stock(self, new_uow, add_product):
        product_id = add_product(units_in_stock=10)
        order = CreateOrderHandler(new_uow()).handle(
            user_id=7, first_item=OrderItemSpec(product_id, 4)
        )
        UpdateOrderStatusHandler(new_uow()).handle(order.id, OrderStatus.SHIPPED)

        DeleteOrderHandler(new_uow()).handle(order.id)

        assert _stock(new_uow, product_id) == 10


class TestQueries:

    def test_paging_with_user_filter(self, new_uow):
        for user_id in (7, 8, 7, 7, 8):
            CreateOrderHandler(new_uow()).handle(user_id=user_id)

        page = ListOrdersHandler(new_uow()).handle(page_number=1, page_size=2, user_id=7)

        assert [o.id for o in page.orders] == [4]
        assert page.total_items == 3
        assert page.total_pages == 2

    def test_sorting_by_status(self, new_uow, add_product):
        product_id = add_product(units_in_stock=10)
        first = CreateOrderHandler(new_uow()).handle(user_id=7, first_item=OrderItemSpec(product_id, 1))
        second = CreateOrderHandler(new_uow()).handle(user_id=7)
        UpdateOrderStatusHandler(new_uow()).handle(first.id, OrderStatus.CANCELLED)

        page = ListOrdersHandler(new_uow()).handle(page_number=0, page_size=10, sort_by="status")

        assert [o.id for o in page.orders] == [second.id, first.id]

    def test_units_per_product(self, new_uow, add_product):
        a = add_product("A", units_in_stock=10)
        b = add_product("B", units_in_stock=10)
        kept = CreateOrderHandler(new_uow()).handle(user_id=7, first_item=OrderItemSpec(a, 2))
        AddOrderItemHandler(new_uow()).handle(kept.id, b, 1)
        dropped = CreateOrderHandler(new_uow()).handle(user_id=7, first_item=OrderItemSpec(a, 5))
        UpdateOrderStatusHandler(new_uow()).handle(dropped.id, OrderStatus.CANCELLED)

        assert ProductQuantitiesHandler(new_uow()).handle() == {a: 2, b: 1}

    def test_show_stock(self, new_uow, add_product):
        add_product("A", units_in_stock=3)
        add_product("B", units_in_stock=0)

        snapshots = ShowStockHandler(new_uow()).handle()

        assert [(s.name, s.units_in_stock) for s in snapshots] == [("A", 3), ("B", 0)]

    def test_list_items_across_orders(self, new_uow, add_product):
        a = add_product("A", units_in_stock=10)
        b = add_product("B", units_in_stock=10)
        first = CreateOrderHandler(new_uow()).handle(user_id=7, first_item=OrderItemSpec(a, 2))
        second = CreateOrderHandler(new_uow()).handle(user_id=8, first_item=OrderItemSpec(b, 3))

        items = ListOrderItemsHandler(new_uow(read_only=True)).handle()

        assert [(i.order_id, i.product_id, i.quantity) for i in items] == [
            (first.id, a, 2),
            (second.id, b, 3),
        ]

    def test_read_only_units_of_work_share_the_database(self, new_uow):
        order_id = CreateOrderHandler(new_uow()).handle(user_id=7).id

        with new_uow(read_only=True) as first, new_uow(read_only=True) as second:
            assert first.orders.get_by_id(order_id).user_id == 7
            assert second.orders.get_by_id(order_id).user_id == 7
            assert ShowOrderHandler(new_uow(read_only=True)).handle(order_id).id == order_id
