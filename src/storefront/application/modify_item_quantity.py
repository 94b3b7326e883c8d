"""Application service: Modify Item Quantity use case.

Moves an item from its committed quantity to a new one with a single
ledger adjustment.  Setting a quantity to zero is rejected; removing an
item goes through deletion.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderItemDTO, item_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.stock_ledger import DEFAULT_MAX_RETRIES, StockLedger

logger = structlog.get_logger(__name__)


class ModifyItemQuantityHandler:

    def __init__(self, uow: UnitOfWork, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        self._uow = uow
        self._max_retries = max_retries

    def handle(self, item_id: int, new_quantity: int) -> OrderItemDTO:
        qty = Quantity(new_quantity)

        with self._uow:
            order = self._uow.orders.get_by_item_id(item_id, lock=True)
            if order is None:
                raise EntityNotFoundError(f"Order item #{item_id} not found")

            item = order.find_item(item_id)
            old_quantity = item.quantity.value
            delta = order.change_quantity(item_id, qty)

            ledger = StockLedger(self._uow, self._max_retries)
            ledger.adjust(item.product_id, delta)

            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Order item quantity changed",
            item_id=item_id,
            product_id=item.product_id,
            old_quantity=old_quantity,
            new_quantity=qty.value,
        )
        return item_to_dto(item)
