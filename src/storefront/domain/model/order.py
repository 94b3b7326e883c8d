"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items.  Items refer
to products by id only; a product never points back at the items that
draw on it.  The status state machine lives here and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from storefront.domain.exceptions import (
    EntityNotFoundError,
    InvalidStateError,
    InvalidTransitionError,
    ValidationError,
)
from storefront.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    ACTIVE = "ACTIVE"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @staticmethod
    def parse(raw: str) -> OrderStatus:
        """Map a boundary string to a status.  Matching is case-sensitive."""
        try:
            return OrderStatus(raw)
        except ValueError:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Unknown order status {raw!r} (expected one of {allowed})"
            ) from None


# ---------------------------------------------------------------------------
# Transition table.  Statuses missing a target here are terminal.
# ---------------------------------------------------------------------------
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.ACTIVE: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def _today() -> date:
    return datetime.now(timezone.utc).date()


@dataclass
class OrderItem:
    """A line item: so many units of one product, reserved for one order.

    ``product_id`` is a lookup key for the Stock Ledger, never an
    ownership link.
    """

    id: int | None
    product_id: int
    quantity: Quantity
    order_id: int | None = None


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders.  The ``__init__``
    is intentionally simple so the repository can reconstitute persisted
    orders without re-validating.
    """

    id: int | None
    user_id: int
    status: OrderStatus = OrderStatus.ACTIVE
    delivery_price: Money = field(default_factory=lambda: Money(Decimal("0.00")))
    start_date: date = field(default_factory=_today)
    delivery_date: date | None = None
    items: list[OrderItem] = field(default_factory=list)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(user_id: int, delivery_price: Money | None = None) -> Order:
        """Create an empty ACTIVE order."""
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise ValidationError(f"User id must be an integer, got {user_id!r}")
        order = Order(id=None, user_id=user_id)
        if delivery_price is not None:
            order.delivery_price = delivery_price
        return order

    # --- Item management (ACTIVE only) ----------------------------------------

    def add_item(self, product_id: int, quantity: Quantity) -> OrderItem:
        """Attach a new line item.  Stock must already be reserved."""
        self.ensure_mutable()
        item = OrderItem(id=None, product_id=product_id, quantity=quantity, order_id=self.id)
        self.items.append(item)
        return item

    def change_quantity(self, item_id: int, new_quantity: Quantity) -> int:
        """Set an item's quantity and return the signed change in units."""
        self.ensure_mutable()
        item = self.find_item(item_id)
        delta = new_quantity.value - item.quantity.value
        item.quantity = new_quantity
        return delta

    def remove_item(self, item_id: int) -> OrderItem:
        """Detach an item.  Its stock must be released by the caller."""
        self.ensure_mutable()
        item = self.find_item(item_id)
        self.items = [i for i in self.items if i is not item]
        return item

    def find_item(self, item_id: int) -> OrderItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise EntityNotFoundError(f"Order item #{item_id} not found in order #{self.id}")

    # --- State transitions ----------------------------------------------------

    def transition_to(self, target: OrderStatus) -> None:
        """Move to *target* if the transition table allows it.

        Stock release on cancellation is the caller's job (via the Stock
        Ledger); this only guards and records the status change.
        """
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f"Cannot move order #{self.id} from {self.status.value} "
                f"to {target.value}"
            )
        if not self.items:
            raise InvalidTransitionError(
                f"Cannot move order #{self.id} out of {self.status.value} — it has no items"
            )
        self.status = target
        if target is OrderStatus.DELIVERED:
            self.delivery_date = _today()

    def ensure_mutable(self) -> None:
        if self.status is not OrderStatus.ACTIVE:
            raise InvalidStateError(
                f"Order #{self.id} is {self.status.value}; items can only "
                f"change while it is ACTIVE"
            )

    def ensure_deletable(self) -> None:
        if self.status is OrderStatus.DELIVERED:
            raise InvalidStateError(f"Cannot delete order #{self.id} — it was already delivered")

    # --- Computed properties --------------------------------------------------

    @property
    def holds_reservation(self) -> bool:
        """True while the items' units are still counted against stock."""
        return self.status is not OrderStatus.CANCELLED

    @property
    def total_items(self) -> int:
        return sum(item.quantity.value for item in self.items)
