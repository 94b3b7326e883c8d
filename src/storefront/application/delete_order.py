"""Application service: Delete Order use case.

Releases the stock still held by the order's items (a cancelled order
already gave it back), then deletes the order and, by cascade, its
items.  Delivered orders cannot be deleted.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.stock_ledger import DEFAULT_MAX_RETRIES, StockLedger

logger = structlog.get_logger(__name__)


class DeleteOrderHandler:

    def __init__(self, uow: UnitOfWork, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        self._uow = uow
        self._max_retries = max_retries

    def handle(self, order_id: int) -> None:
        with self._uow:
            order = self._uow.orders.get_by_id(order_id, lock=True)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            order.ensure_deletable()

            released = 0
            if order.holds_reservation:
                ledger = StockLedger(self._uow, self._max_retries)
                for item in order.items:
                    ledger.release(item.product_id, item.quantity.value)
                    released += item.quantity.value

            self._uow.orders.delete(order)
            self._uow.commit()

        logger.info(
            "Order deleted",
            order_id=order_id,
            status=order.status.value,
            units_released=released,
        )
