"""Integration tests for the CreateOrder use case.

Uses the in-memory fake unit of work — no database.
"""

import pytest

from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import OrderItemSpec
from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from tests.fakes import FakeUnitOfWork


def _setup() -> tuple[CreateOrderHandler, FakeUnitOfWork]:
    uow = FakeUnitOfWork([
        Product(id=1, name="Widget", price=Money.of("15.00"), units_in_stock=10),
        Product(id=2, name="Gadget", price=Money.of("25.00"), units_in_stock=1),
    ])
    return CreateOrderHandler(uow), uow


class TestCreateOrderHappyPath:

    def test_creates_empty_active_order(self):
        handler, uow = _setup()
        dto = handler.handle(user_id=7)
        assert dto.id == 1
        assert dto.status == "ACTIVE"
        assert dto.user_id == 7
        assert dto.items == []
        assert dto.delivery_date is None
        assert uow.commits == 1

    def test_keeps_delivery_price(self):
        handler, _ = _setup()
        dto = handler.handle(user_id=7, delivery_price="4.5")
        assert dto.delivery_price == "$4.50"

    def test_initial_item_reserves_stock(self):
        handler, uow = _setup()
        dto = handler.handle(user_id=7, first_item=OrderItemSpec(product_id=1, quantity=3))

        assert len(dto.items) == 1
        assert dto.items[0].product_id == 1
        assert dto.items[0].quantity == 3
        assert dto.total_items == 3
        assert uow.products.units(1) == 7

    def test_persists_order(self):
        handler, uow = _setup()
        dto = handler.handle(user_id=7)
        assert uow.orders.get_by_id(dto.id).status == OrderStatus.ACTIVE


class TestCreateOrderFailures:

    def test_insufficient_stock_creates_nothing(self):
        handler, uow = _setup()
        with pytest.raises(InsufficientStockError):
            handler.handle(user_id=7, first_item=OrderItemSpec(product_id=2, quantity=2))

        assert uow.orders.get_by_id(1) is None
        assert uow.products.units(2) == 1
        assert uow.commits == 0

    def test_unknown_product_rejected(self):
        handler, uow = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle(user_id=7, first_item=OrderItemSpec(product_id=99, quantity=1))
        assert uow.orders.get_by_id(1) is None

    def test_zero_quantity_rejected(self):
        handler, uow = _setup()
        with pytest.raises(ValidationError, match="must be positive"):
            handler.handle(user_id=7, first_item=OrderItemSpec(product_id=1, quantity=0))
        assert uow.products.units(1) == 10

    def test_invalid_delivery_price_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Invalid money amount"):
            handler.handle(user_id=7, delivery_price="free")
