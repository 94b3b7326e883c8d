"""Application service: Delete Order Item use case."""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.stock_ledger import DEFAULT_MAX_RETRIES, StockLedger

logger = structlog.get_logger(__name__)


class DeleteOrderItemHandler:

    def __init__(self, uow: UnitOfWork, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        self._uow = uow
        self._max_retries = max_retries

    def handle(self, item_id: int) -> None:
        """Remove a line item from an ACTIVE order and give its units back."""
        with self._uow:
            order = self._uow.orders.get_by_item_id(item_id, lock=True)
            if order is None:
                raise EntityNotFoundError(f"Order item #{item_id} not found")

            item = order.remove_item(item_id)

            ledger = StockLedger(self._uow, self._max_retries)
            ledger.release(item.product_id, item.quantity.value)

            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Order item deleted",
            order_id=order.id,
            item_id=item_id,
            product_id=item.product_id,
            released=item.quantity.value,
        )
