"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order, OrderItem

# Columns a page of orders may be sorted by.
ORDER_SORT_FIELDS = (
    "id",
    "user_id",
    "status",
    "start_date",
    "delivery_date",
    "delivery_price",
)


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int, lock: bool = False) -> Order | None:
        """Return an order by its ID, or None if not found.

        With *lock*, implementations hold the order for the rest of the
        unit of work where the store supports it.  Handlers that change
        the order load it that way; queries do not.
        """

    @abstractmethod
    def get_by_item_id(self, item_id: int, lock: bool = False) -> Order | None:
        """Return the order owning the given line item, or None."""

    @abstractmethod
    def list_items(self) -> list[OrderItem]:
        """Return every line item across all orders, ordered by id."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order together with its items.

        Assigns ids to the order and to any item that has none yet.
        Items no longer on the order are deleted.
        """

    @abstractmethod
    def delete(self, order: Order) -> None:
        """Delete an order; its items go with it."""

    @abstractmethod
    def list_page(
        self,
        offset: int,
        limit: int,
        sort_by: str = "id",
        user_id: int | None = None,
    ) -> tuple[list[Order], int]:
        """Return one page of orders and the total matching the same filter."""

    @abstractmethod
    def units_per_product(self) -> dict[int, int]:
        """Sum item quantities per product over orders that are not cancelled."""
