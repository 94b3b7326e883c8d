"""Application service: Update Order Status use case.

The only path that changes an order's status.  The transition itself is
guarded by ``Order.transition_to``; this handler adds the stock side of
cancellation: every item's units go back to stock before the new
status is committed.  Shipping and delivery keep the reservation, since
those units have left inventory for good.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.stock_ledger import DEFAULT_MAX_RETRIES, StockLedger

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, uow: UnitOfWork, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        self._uow = uow
        self._max_retries = max_retries

    def handle(self, order_id: int, target: OrderStatus | str) -> OrderDTO:
        if not isinstance(target, OrderStatus):
            target = OrderStatus.parse(target)

        with self._uow:
            order = self._uow.orders.get_by_id(order_id, lock=True)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            previous = order.status
            order.transition_to(target)

            if target is OrderStatus.CANCELLED:
                ledger = StockLedger(self._uow, self._max_retries)
                for item in order.items:
                    ledger.release(item.product_id, item.quantity.value)

            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Order status changed",
            order_id=order_id,
            from_status=previous.value,
            to_status=target.value,
        )
        return order_to_dto(order)
