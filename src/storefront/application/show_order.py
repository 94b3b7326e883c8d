"""Application service: Show Order / Show Order Item / List Order Items use cases (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, OrderItemDTO, item_to_dto, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)


class ShowOrderItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, item_id: int) -> OrderItemDTO:
        with self._uow:
            order = self._uow.orders.get_by_item_id(item_id)
        if order is None:
            raise EntityNotFoundError(f"Order item #{item_id} not found")
        return item_to_dto(order.find_item(item_id))


class ListOrderItemsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[OrderItemDTO]:
        """Every line item across all orders, oldest first."""
        with self._uow:
            items = self._uow.orders.list_items()
        return [item_to_dto(item) for item in items]
