"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the boundary and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.order import Order, OrderItem


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: which product and how many units."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class OrderItemDTO:
    id: int
    order_id: int
    product_id: int
    quantity: int


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as handed to the presentation layer."""

    id: int
    user_id: int
    status: str
    delivery_price: str  # formatted, e.g. "$4.99"
    start_date: str
    delivery_date: str | None
    items: list[OrderItemDTO]
    total_items: int


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderDTO]
    page_number: int
    page_size: int
    total_items: int
    total_pages: int


# --- Mapping ------------------------------------------------------------------


def item_to_dto(item: OrderItem) -> OrderItemDTO:
    return OrderItemDTO(
        id=item.id,  # type: ignore[arg-type]
        order_id=item.order_id,  # type: ignore[arg-type]
        product_id=item.product_id,
        quantity=item.quantity.value,
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        status=order.status.value,
        delivery_price=str(order.delivery_price),
        start_date=order.start_date.isoformat(),
        delivery_date=order.delivery_date.isoformat() if order.delivery_date else None,
        items=[item_to_dto(item) for item in sorted(order.items, key=lambda i: i.id or 0)],
        total_items=order.total_items,
    )
