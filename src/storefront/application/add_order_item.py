"""Application service: Add Order Item use case.

Reserves the stock and attaches the item in one unit of work.  If the
reservation fails, no item is created and the ledger's error reaches
the caller untouched.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderItemDTO, item_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.stock_ledger import DEFAULT_MAX_RETRIES, StockLedger

logger = structlog.get_logger(__name__)


class AddOrderItemHandler:

    def __init__(self, uow: UnitOfWork, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        self._uow = uow
        self._max_retries = max_retries

    def handle(self, order_id: int, product_id: int, quantity: int) -> OrderItemDTO:
        qty = Quantity(quantity)

        with self._uow:
            order = self._uow.orders.get_by_id(order_id, lock=True)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            order.ensure_mutable()

            ledger = StockLedger(self._uow, self._max_retries)
            ledger.reserve(product_id, qty.value)

            item = order.add_item(product_id, qty)
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Order item added",
            order_id=order_id,
            item_id=item.id,
            product_id=product_id,
            quantity=qty.value,
        )
        return item_to_dto(item)
