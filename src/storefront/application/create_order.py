"""Application service: Create Order use case.

Creates an ACTIVE order, either empty or with one initial item.  The
initial item's stock is reserved in the same unit of work, so a failed
reservation leaves no order behind.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderDTO, OrderItemSpec, order_to_dto
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.stock_ledger import DEFAULT_MAX_RETRIES, StockLedger

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(self, uow: UnitOfWork, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        self._uow = uow
        self._max_retries = max_retries

    def handle(
        self,
        user_id: int,
        delivery_price: str = "0.00",
        first_item: OrderItemSpec | None = None,
    ) -> OrderDTO:
        order = Order.create(user_id=user_id, delivery_price=Money.of(delivery_price))

        with self._uow:
            if first_item is not None:
                qty = Quantity(first_item.quantity)
                ledger = StockLedger(self._uow, self._max_retries)
                ledger.reserve(first_item.product_id, qty.value)
                order.add_item(first_item.product_id, qty)

            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Order created",
            order_id=order.id,
            user_id=user_id,
            items=len(order.items),
        )
        return order_to_dto(order)
